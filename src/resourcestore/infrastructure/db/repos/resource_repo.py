from __future__ import annotations

import logging
import sqlite3
from contextlib import closing
from pathlib import Path

from resourcestore.core.errors import ResourceConsistencyError
from resourcestore.domain.models.resource import (
    CreateResource,
    DeleteResource,
    FindResource,
    Resource,
    UpdateResource,
)
from resourcestore.infrastructure.db.query import build_find_query, build_update_statement
from resourcestore.infrastructure.db.sqlite import get_connection, transaction

logger = logging.getLogger(__name__)


class ResourceRepo:
    """SQLite-backed store for resources.

    Writes are followed by a read-back by primary key so callers always get the
    row as storage sees it, including server-side timestamps.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    def create(self, create: CreateResource) -> Resource:
        with get_connection(self.db_path) as conn:
            cursor = conn.execute(
                """
                INSERT INTO resource (
                    filename,
                    "blob",
                    external_link,
                    type,
                    size,
                    creator_id,
                    internal_path
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    create.filename,
                    create.blob,
                    create.external_link,
                    create.type,
                    create.size,
                    create.creator_id,
                    create.internal_path,
                ),
            )
            resource_id = cursor.lastrowid
            conn.commit()

        logger.debug("Inserted resource %s (%s)", resource_id, create.filename)
        return self._read_back(resource_id)

    def list(self, find: FindResource) -> list[Resource]:
        query, args = build_find_query(find)
        with get_connection(self.db_path) as conn:
            rows = conn.execute(query, args).fetchall()
        return [self._to_model(row, with_blob=find.get_blob) for row in rows]

    def get(self, find: FindResource) -> Resource | None:
        resources = self.list(find)
        return resources[0] if resources else None

    def update(self, update: UpdateResource) -> Resource:
        stmt, args = build_update_statement(update)
        with get_connection(self.db_path) as conn:
            conn.execute(stmt, args)
            conn.commit()

        logger.debug("Updated resource %s", update.id)
        return self._read_back(update.id)

    def delete(self, delete: DeleteResource) -> None:
        """Delete one resource and then sweep orphans.

        Missing ids are not an error. If the sweep fails the error propagates
        even though the row itself is already gone.
        """
        with get_connection(self.db_path) as conn:
            conn.execute("DELETE FROM resource WHERE id = ?", (delete.id,))
            conn.commit()
        logger.info("Deleted resource %s", delete.id)

        with closing(get_connection(self.db_path)) as conn, transaction(conn):
            self.vacuum(conn)

    def vacuum(self, conn: sqlite3.Connection) -> int:
        """Remove resources whose creator no longer exists.

        Runs on the caller's open transaction; committing is the caller's job.
        """
        cursor = conn.execute(
            """
            DELETE FROM resource
            WHERE creator_id NOT IN (
                SELECT id FROM user
            )
            """
        )
        removed = cursor.rowcount
        if removed:
            logger.info("Vacuumed %d orphaned resource(s)", removed)
        return removed

    def _read_back(self, resource_id: int) -> Resource:
        resources = self.list(FindResource(id=resource_id))
        if len(resources) != 1:
            raise ResourceConsistencyError(f"unexpected resource count: {len(resources)}")
        return resources[0]

    @staticmethod
    def _to_model(row: sqlite3.Row, *, with_blob: bool) -> Resource:
        return Resource(
            id=row["id"],
            filename=row["filename"],
            external_link=row["external_link"],
            type=row["type"],
            size=row["size"],
            creator_id=row["creator_id"],
            created_ts=row["created_ts"],
            updated_ts=row["updated_ts"],
            internal_path=row["internal_path"],
            memo_id=row["memo_id"],
            blob=bytes(row["blob"]) if with_blob and row["blob"] is not None else None,
        )
