from __future__ import annotations

import copy

from issuekit.core.constants.notifications import DEFAULT_NOTIFICATION_SCHEME
from issuekit.core.constants.workflow import WORKFLOW_TRANSITIONS
from issuekit.core.contracts.project import Project, ProjectCategory, ProjectType

DEMO_PROJECT_ID = "p-demo"


def get_seed_projects() -> list[Project]:
    return [
        Project(
            id=DEMO_PROJECT_ID,
            key="DEMO",
            name="Jira Mobile Clone Dev",
            description="このアプリ自体の開発プロジェクトを模したデモデータです。",
            lead_id="u1",
            category=ProjectCategory.SOFTWARE,
            type=ProjectType.SCRUM,
            icon_url="🚀",
            starred=True,
            workflow_settings=copy.deepcopy(WORKFLOW_TRANSITIONS),
            notification_settings=copy.deepcopy(DEFAULT_NOTIFICATION_SCHEME),
        )
    ]
