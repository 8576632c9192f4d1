"""Read models for rows of the hosted record store."""

from teamdesk.models.identities import Identity
from teamdesk.models.projects import Project
from teamdesk.models.tasks import Task

__all__ = [
    "Identity",
    "Project",
    "Task",
]
