"""User-facing messages for record-store write failures."""

from __future__ import annotations

from fastapi import HTTPException, status

from teamdesk.db.record_client import EmptyWriteResult, RecordStoreError, RecordStoreUnavailable

# Error code the record store returns when a policy filtered out every row.
NO_ROWS_ERROR_CODE = "PGRST116"
PERMISSION_MARKERS = ("permission", "policy")
PERMISSION_HINT = (
    "This looks like a permissions problem. Check that you are the creator "
    "or a member of this {entity}."
)
UNKNOWN_ERROR = "Unknown error"


def is_permission_error(error: RecordStoreError) -> bool:
    """Whether a write failure looks like an authorization denial."""
    if isinstance(error, EmptyWriteResult):
        return True
    if error.code == NO_ROWS_ERROR_CODE:
        return True
    if error.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN):
        return True
    message = (error.message or "").lower()
    return any(marker in message for marker in PERMISSION_MARKERS)


def describe_write_error(error: RecordStoreError, *, entity: str) -> str:
    """Build the message shown to the user for a failed save."""
    reason = error.message or error.details or error.hint or UNKNOWN_ERROR
    message = f"Error while saving the {entity}: {reason}"
    if is_permission_error(error):
        message = f"{message}\n\n{PERMISSION_HINT.format(entity=entity)}"
    return message


def empty_write_message(entity: str) -> str:
    return (
        f"You do not have permission to modify this {entity}. "
        f"Make sure you are assigned to this {entity}."
    )


def write_error_to_http(error: RecordStoreError, *, entity: str) -> HTTPException:
    """Map a failed write onto the HTTP error returned to the dashboard."""
    if isinstance(error, EmptyWriteResult):
        return HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"code": "write_not_applied", "message": empty_write_message(entity)},
        )
    if is_permission_error(error):
        status_code = status.HTTP_403_FORBIDDEN
        code = "permission_denied"
    elif isinstance(error, RecordStoreUnavailable):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        code = "record_store_unavailable"
    else:
        status_code = status.HTTP_502_BAD_GATEWAY
        code = "write_rejected"
    return HTTPException(
        status_code=status_code,
        detail={"code": code, "message": describe_write_error(error, entity=entity)},
    )
