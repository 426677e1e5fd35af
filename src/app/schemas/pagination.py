"""Cursor pagination for execution and delivery history."""

import base64
import binascii
from datetime import datetime
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, Field

T = TypeVar("T")

CursorValue = datetime | UUID | str


class PaginatedResponse(BaseModel, Generic[T]):
    """A page of history, newest first.

    next_cursor is opaque to clients: pass it back unchanged to continue
    after the last item of this page.
    """

    items: list[T]
    next_cursor: str | None = Field(
        default=None,
        description="Cursor for the next page. None on the last page.",
    )
    has_more: bool = Field(
        default=False,
        description="Whether older items exist after this page.",
    )


def encode_cursor(value: CursorValue) -> str:
    """Encode the sort key of the last item on a page."""
    raw = value.isoformat() if isinstance(value, datetime) else str(value)
    return base64.urlsafe_b64encode(raw.encode()).decode()


def decode_cursor(cursor: str) -> CursorValue:
    """Decode a cursor back into a datetime, UUID or plain string, tried in that order.

    Raises:
        ValueError: If the cursor is not valid base64 text
    """
    try:
        raw = base64.urlsafe_b64decode(cursor.encode()).decode()
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ValueError("Invalid cursor") from e
    if not raw:
        raise ValueError("Invalid cursor")

    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        pass
    try:
        return UUID(raw)
    except ValueError:
        return raw
