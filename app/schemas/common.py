# === backend/app/schemas/common.py ===
from typing import Literal

ProjectStatus = Literal["Planning", "Development", "Testing", "Live", "Maintenance", "On Hold"]
IssuePriority = Literal["Low", "Medium", "High"]
IssueStatus = Literal["Open", "Closed"]
RoleName = Literal["admin", "senior_developer", "project_manager", "developer"]
BackupFormat = Literal["json", "pdf", "text"]
