"""Record store collection names."""

from __future__ import annotations

from enum import Enum


class Collection(str, Enum):
    """Collections exposed by the hosted record store."""

    USERS = "users"
    TASKS = "tasks"
    PROJECTS = "projects"
