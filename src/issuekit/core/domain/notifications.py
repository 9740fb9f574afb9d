"""Notification-scheme fan-out.

Turns ``(scheme, event, issue, actor)`` into one draft per recipient. The
adapters persist the drafts; nothing here touches storage.
"""

from __future__ import annotations

from dataclasses import dataclass

from issuekit.core.constants.labels import STATUS_LABELS
from issuekit.core.constants.notifications import (
    DEFAULT_NOTIFICATION_SCHEME,
    DEFAULT_NOTIFICATION_TITLE,
    NOTIFICATION_TITLES,
)
from issuekit.core.contracts.issue import Issue
from issuekit.core.contracts.notification import NotificationEvent, NotificationType, RecipientRole
from issuekit.core.contracts.project import NotificationScheme, Project


@dataclass(frozen=True)
class NotificationDraft:
    recipient_id: str
    title: str
    description: str
    type: NotificationType
    issue_id: str


def resolve_scheme(project: Project | None) -> NotificationScheme:
    if project is None or project.notification_settings is None:
        return DEFAULT_NOTIFICATION_SCHEME
    return project.notification_settings


def resolve_recipients(scheme: NotificationScheme, event: str, issue: Issue, actor_id: str) -> list[str]:
    """Concrete user ids for *event*, in reporter/assignee/watcher order, never including *actor_id*."""
    roles = set(scheme.get(event, []))
    recipients: dict[str, None] = {}
    if RecipientRole.REPORTER in roles and issue.reporter_id:
        recipients[issue.reporter_id] = None
    if RecipientRole.ASSIGNEE in roles and issue.assignee_id:
        recipients[issue.assignee_id] = None
    if RecipientRole.WATCHER in roles:
        for watcher_id in issue.watcher_ids:
            recipients[watcher_id] = None
    recipients.pop(actor_id, None)
    return list(recipients)


def notification_title(event: str, issue: Issue) -> str:
    template = NOTIFICATION_TITLES.get(event)
    if template is None:
        return DEFAULT_NOTIFICATION_TITLE
    return template.format(key=issue.key, status_label=STATUS_LABELS.get(issue.status, issue.status))


def build_notifications(
    scheme: NotificationScheme,
    event: str,
    issue: Issue,
    actor_id: str,
) -> list[NotificationDraft]:
    title = notification_title(event, issue)
    kind = NotificationType.MENTION if event == NotificationEvent.COMMENT_ADDED else NotificationType.SYSTEM
    return [
        NotificationDraft(
            recipient_id=recipient_id,
            title=title,
            description=issue.title,
            type=kind,
            issue_id=issue.id,
        )
        for recipient_id in resolve_recipients(scheme, event, issue, actor_id)
    ]


def status_change_event(new_status: str) -> NotificationEvent:
    if new_status == "Done":
        return NotificationEvent.ISSUE_RESOLVED
    return NotificationEvent.STATUS_CHANGED
