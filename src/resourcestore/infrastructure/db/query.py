"""SQL construction for sparse resource filters and patches.

Only column names and operators are written into the statement text; every
value, including limit and offset, travels as a bound parameter.
"""

from __future__ import annotations

from typing import Any

from resourcestore.core.errors import ValidationError
from resourcestore.domain.models.resource import FindResource, UpdateResource

RESOURCE_FIELDS = (
    "id",
    "filename",
    "external_link",
    "type",
    "size",
    "creator_id",
    "created_ts",
    "updated_ts",
    "internal_path",
    "memo_id",
)
BLOB_FIELD = '"blob"'


def build_where(find: FindResource) -> tuple[list[str], list[Any]]:
    where: list[str] = ["1 = 1"]
    args: list[Any] = []

    if find.id is not None:
        where.append("id = ?")
        args.append(find.id)
    if find.creator_id is not None:
        where.append("creator_id = ?")
        args.append(find.creator_id)
    if find.filename is not None:
        where.append("filename = ?")
        args.append(find.filename)
    if find.memo_id is not None:
        where.append("memo_id = ?")
        args.append(find.memo_id)
    if find.has_related_memo:
        where.append("memo_id IS NOT NULL")

    return where, args


def select_fields(find: FindResource) -> list[str]:
    fields = list(RESOURCE_FIELDS)
    if find.get_blob:
        fields.append(BLOB_FIELD)
    return fields


def build_find_query(find: FindResource) -> tuple[str, list[Any]]:
    where, args = build_where(find)
    query = f"""
        SELECT
            {", ".join(select_fields(find))}
        FROM resource
        WHERE {" AND ".join(where)}
        GROUP BY id
        ORDER BY created_ts DESC, id DESC
    """
    if find.limit is not None:
        query = f"{query} LIMIT ?"
        args.append(find.limit)
        # OFFSET is only meaningful together with LIMIT.
        if find.offset is not None:
            query = f"{query} OFFSET ?"
            args.append(find.offset)

    return query, args


def build_update_statement(update: UpdateResource) -> tuple[str, list[Any]]:
    if update.is_empty():
        raise ValidationError(f"Update for resource {update.id} does not set any field")

    assignments: list[str] = []
    args: list[Any] = []

    if update.updated_ts is not None:
        assignments.append("updated_ts = ?")
        args.append(update.updated_ts)
    if update.filename is not None:
        assignments.append("filename = ?")
        args.append(update.filename)
    if update.internal_path is not None:
        assignments.append("internal_path = ?")
        args.append(update.internal_path)
    if update.unbind_memo:
        assignments.append("memo_id = NULL")
    elif update.memo_id is not None:
        assignments.append("memo_id = ?")
        args.append(update.memo_id)
    if update.blob is not None:
        assignments.append(f"{BLOB_FIELD} = ?")
        args.append(update.blob)

    args.append(update.id)
    stmt = f"""
        UPDATE resource
        SET {", ".join(assignments)}
        WHERE id = ?
    """
    return stmt, args
