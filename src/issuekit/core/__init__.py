"""Backend-independent core: contracts, constants, domain rules, JQL and seed data."""
