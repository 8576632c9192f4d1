"""Public schema exports shared across API route modules."""

from teamdesk.schemas.auth import SessionRead, SignInRequest
from teamdesk.schemas.common import OkResponse
from teamdesk.schemas.dashboard import DashboardRead, TeamRead
from teamdesk.schemas.errors import ErrorDetail, ErrorResponse
from teamdesk.schemas.health import HealthStatusResponse
from teamdesk.schemas.permissions import PermissionSnapshot
from teamdesk.schemas.projects import ProjectCreate, ProjectListRead, ProjectRead, ProjectUpdate
from teamdesk.schemas.reports import (
    DepartmentComposition,
    DepartmentStats,
    MemberProductivity,
    ProjectStatusBreakdown,
    ReportRead,
    StatusBreakdown,
)
from teamdesk.schemas.tasks import TaskCreate, TaskListRead, TaskRead, TaskUpdate
from teamdesk.schemas.users import ProfileUpdate, UserAdminUpdate, UserCreate, UserRead

__all__ = [
    "DashboardRead",
    "DepartmentComposition",
    "DepartmentStats",
    "ErrorDetail",
    "ErrorResponse",
    "HealthStatusResponse",
    "MemberProductivity",
    "OkResponse",
    "PermissionSnapshot",
    "ProfileUpdate",
    "ProjectCreate",
    "ProjectListRead",
    "ProjectRead",
    "ProjectStatusBreakdown",
    "ProjectUpdate",
    "ReportRead",
    "SessionRead",
    "SignInRequest",
    "StatusBreakdown",
    "TaskCreate",
    "TaskListRead",
    "TaskRead",
    "TaskUpdate",
    "TeamRead",
    "UserAdminUpdate",
    "UserCreate",
    "UserRead",
]
