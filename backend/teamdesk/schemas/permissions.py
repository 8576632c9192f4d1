"""Permission snapshot returned with every editable record."""

from __future__ import annotations

from pydantic import Field
from sqlmodel import SQLModel


class PermissionSnapshot(SQLModel):
    """Capabilities of the current identity on one task or project."""

    can_fully_edit: bool = Field(
        description="Creator (or creation mode): every field may be written.",
        examples=[False],
    )
    can_update_limited_fields: bool = Field(
        description="Assignee/member: only the limited status fields may be written.",
        examples=[True],
    )
    can_delete: bool = Field(
        description="Creator only: the record may be deleted.",
        examples=[False],
    )

    @property
    def can_submit(self) -> bool:
        """Whether any write at all is allowed."""
        return self.can_fully_edit or self.can_update_limited_fields

    @property
    def limited_only(self) -> bool:
        """Whether writes must be restricted to the limited field set."""
        return self.can_update_limited_fields and not self.can_fully_edit
