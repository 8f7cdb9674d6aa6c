from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable, Sequence
from contextlib import closing
from dataclasses import dataclass, field
from pathlib import Path

from resourcestore.infrastructure.db.sqlite import get_connection, transaction

logger = logging.getLogger(__name__)

VacuumPass = Callable[[sqlite3.Connection], int]


@dataclass(slots=True)
class VacuumSummary:
    removed: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.removed.values())


class VacuumService:
    """Runs every registered orphan sweep inside one transaction.

    Either all passes commit together or none of them do.
    """

    def __init__(self, db_path: Path, passes: Sequence[tuple[str, VacuumPass]]) -> None:
        self.db_path = db_path
        self.passes = list(passes)

    def run(self) -> VacuumSummary:
        summary = VacuumSummary()
        with closing(get_connection(self.db_path)) as conn, transaction(conn):
            for name, vacuum_pass in self.passes:
                summary.removed[name] = vacuum_pass(conn)
        logger.info("Vacuum removed %d row(s) across %d pass(es)", summary.total, len(self.passes))
        return summary
