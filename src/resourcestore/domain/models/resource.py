from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Resource:
    id: int
    filename: str
    external_link: str
    type: str
    size: int
    creator_id: int
    created_ts: int
    updated_ts: int
    internal_path: str
    memo_id: int | None = None
    # None means the payload was not fetched, not that it is empty.
    blob: bytes | None = None


@dataclass(slots=True)
class CreateResource:
    filename: str
    type: str
    size: int
    creator_id: int
    blob: bytes | None = None
    external_link: str = ""
    internal_path: str = ""


@dataclass(slots=True)
class FindResource:
    """Sparse selection over resources; every None field is left out of the predicate."""

    id: int | None = None
    creator_id: int | None = None
    filename: str | None = None
    memo_id: int | None = None
    has_related_memo: bool = False
    get_blob: bool = False
    limit: int | None = None
    offset: int | None = None


@dataclass(slots=True)
class UpdateResource:
    """Sparse patch for one resource.

    Fields left as None are not touched. ``unbind_memo`` clears ``memo_id`` and
    wins over a supplied ``memo_id``.
    """

    id: int
    updated_ts: int | None = None
    filename: str | None = None
    internal_path: str | None = None
    memo_id: int | None = None
    unbind_memo: bool = False
    blob: bytes | None = None

    def is_empty(self) -> bool:
        return (
            self.updated_ts is None
            and self.filename is None
            and self.internal_path is None
            and self.memo_id is None
            and not self.unbind_memo
            and self.blob is None
        )


@dataclass(slots=True)
class DeleteResource:
    id: int
