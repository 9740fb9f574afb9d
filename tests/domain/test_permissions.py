from __future__ import annotations

from issuekit.core.domain.permissions import Permission, has_permission
from tests.factories import make_project


def test_admin_may_do_anything() -> None:
    assert has_permission("u1", Permission.MANAGE_PROJECT)
    assert has_permission("u1", "anything")


def test_manage_project_requires_manager_or_lead() -> None:
    assert has_permission("u2", Permission.MANAGE_PROJECT)
    assert not has_permission("u3", Permission.MANAGE_PROJECT)
    assert not has_permission("u3", Permission.MANAGE_PROJECT, make_project(lead_id="u1"))
    assert has_permission("u3", Permission.MANAGE_PROJECT, make_project(lead_id="u3"))


def test_other_actions_are_open_to_everyone() -> None:
    assert has_permission("u3", Permission.DELETE_ISSUE)
