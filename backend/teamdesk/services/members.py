"""Decoding and display helpers for member/assignee id sets.

Stored member sets reach us in several shapes: a native JSON array, a string
holding a JSON array, a single bare id, or a comma-separated list of ids.
`decode_members` is the one place that turns any of those into a canonical
list of string ids. Decoding never raises: malformed input yields an empty
list, flagged as a format error so views can say so instead of silently
showing "unassigned".
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from teamdesk.models.identities import Identity

UNASSIGNED_LABEL = "Unassigned"
FORMAT_ERROR_LABEL = "Format error"


@dataclass(frozen=True)
class MembersDecoded:
    """Result of decoding a stored member set."""

    ids: list[str] = field(default_factory=list)
    ok: bool = True

    @property
    def format_error(self) -> bool:
        return not self.ok


def _stringify(values: Iterable[object]) -> list[str]:
    return [str(value).strip() for value in values]


def decode_members(raw: object) -> MembersDecoded:
    """Decode a raw member/assignee value into canonical string ids."""
    if isinstance(raw, MembersDecoded):
        return raw
    if isinstance(raw, (list, tuple)):
        return MembersDecoded(ids=_stringify(raw))
    if not isinstance(raw, str):
        return MembersDecoded()

    text = raw.strip()
    if not text:
        return MembersDecoded()

    if text.startswith("[") and text.endswith("]"):
        try:
            parsed = json.loads(text)
        except ValueError:
            return MembersDecoded(ok=False)
        if isinstance(parsed, list):
            return MembersDecoded(ids=_stringify(parsed))
        return MembersDecoded(ok=False)

    return MembersDecoded(ids=[segment.strip() for segment in text.split(",") if segment.strip()])


def normalize_members(raw: object) -> list[str]:
    """Return the canonical member id list, degrading bad input to `[]`."""
    return list(decode_members(raw).ids)


def parse_member_input(raw: object, *, field_name: str) -> list[str]:
    """Decode a client-supplied member set, rejecting values that would lose ids.

    Stored rows degrade to `[]`; request bodies raise `ValueError` instead so
    a malformed value never replaces the stored set.
    """
    if raw is None:
        return []
    if not isinstance(raw, (str, list, tuple)):
        msg = f"{field_name} must be a list of ids"
        raise ValueError(msg)
    decoded = decode_members(raw)
    if decoded.format_error:
        msg = f"{field_name} is not a valid id list"
        raise ValueError(msg)
    return list(decoded.ids)


def contains_member(raw: object, identity_id: object) -> bool:
    """Whether an identity id appears in a member set, compared as strings."""
    if identity_id is None:
        return False
    return str(identity_id) in decode_members(raw).ids


def resolve_member_names(ids: Iterable[object], identities: Iterable[Identity]) -> list[str]:
    """Map ids to display names; unknown ids render as `ID: <id>`."""
    names_by_id = {str(identity.id): identity.name for identity in identities}
    names: list[str] = []
    for member_id in ids:
        key = str(member_id)
        name = names_by_id.get(key)
        names.append(name if name else f"ID: {key}")
    return names


def format_member_names(raw: object, identities: Iterable[Identity]) -> str:
    """Render a member set as a comma-separated display string."""
    decoded = decode_members(raw)
    if decoded.format_error:
        return FORMAT_ERROR_LABEL
    if not decoded.ids:
        return UNASSIGNED_LABEL
    return ", ".join(resolve_member_names(decoded.ids, identities))
