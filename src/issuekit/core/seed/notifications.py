from __future__ import annotations

from issuekit.core.contracts.notification import Notification, NotificationType


def get_seed_notifications(now_iso: str, recipient_id: str | None = None) -> list[Notification]:
    return [
        Notification(
            id="n-1",
            title="DEMO-2に割り当てられました",
            description="APIのCORSエラー修正",
            read=False,
            created_at=now_iso,
            type=NotificationType.ASSIGNMENT,
            issue_id="i-2",
            recipient_id=recipient_id,
        )
    ]
