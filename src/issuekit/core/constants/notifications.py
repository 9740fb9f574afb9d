"""Default notification scheme and message templates."""

from __future__ import annotations

from issuekit.core.contracts.notification import NotificationEvent, RecipientRole
from issuekit.core.contracts.project import NotificationScheme

DEFAULT_NOTIFICATION_SCHEME: NotificationScheme = {
    NotificationEvent.ISSUE_CREATED: [RecipientRole.REPORTER, RecipientRole.ASSIGNEE, RecipientRole.WATCHER],
    NotificationEvent.ISSUE_UPDATED: [RecipientRole.ASSIGNEE, RecipientRole.WATCHER],
    NotificationEvent.ISSUE_ASSIGNED: [RecipientRole.ASSIGNEE],
    NotificationEvent.COMMENT_ADDED: [RecipientRole.REPORTER, RecipientRole.ASSIGNEE, RecipientRole.WATCHER],
    NotificationEvent.ISSUE_RESOLVED: [RecipientRole.REPORTER, RecipientRole.WATCHER],
}

DEFAULT_NOTIFICATION_TITLE = "通知"

# Formatted with ``key`` and ``status_label``.
NOTIFICATION_TITLES: dict[str, str] = {
    NotificationEvent.ISSUE_CREATED: "新しい課題が作成されました: {key}",
    NotificationEvent.ISSUE_ASSIGNED: "課題があなたに割り当てられました: {key}",
    NotificationEvent.STATUS_CHANGED: "課題のステータスが「{status_label}」に変更されました",
    NotificationEvent.COMMENT_ADDED: "新しいコメントが追加されました: {key}",
    NotificationEvent.ISSUE_RESOLVED: "課題が解決されました: {key}",
}

AUTOMATION_COMMENT = "自動化ルールによってシステムコメントが追加されました。"
AUTOMATION_SUCCESS_MESSAGE = "ルール「{name}」が実行されました。"
AUTOMATION_FAILURE_MESSAGE = "エラー: {error}"
UNTITLED_ISSUE = "無題"
BACKLOG_SPRINT_NAME = "バックログ"
