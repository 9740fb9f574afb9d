from __future__ import annotations

from issuekit.core.contracts.user import User


def get_seed_users() -> list[User]:
    return [
        User(
            id="u1",
            name="Alice Engineer",
            email="alice@example.com",
            avatar_url="https://images.unsplash.com/photo-1494790108377-be9c29b29330?w=150",
        ),
        User(
            id="u2",
            name="Bob Manager",
            email="bob@example.com",
            avatar_url="https://images.unsplash.com/photo-1599566150163-29194dcaad36?w=150",
        ),
        User(
            id="u3",
            name="Charlie Designer",
            email="charlie@example.com",
            avatar_url="https://images.unsplash.com/photo-1535713875002-d1d0cf377fde?w=150",
        ),
    ]
