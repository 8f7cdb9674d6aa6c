import sqlite3
from pathlib import Path

import pytest

from resourcestore.application.services.vacuum_service import VacuumService
from resourcestore.domain.models.resource import CreateResource, FindResource
from resourcestore.infrastructure.db.repos.resource_repo import ResourceRepo
from resourcestore.infrastructure.db.sqlite import get_connection, initialize_schema


def _bootstrap(tmp_path: Path) -> tuple[ResourceRepo, Path]:
    db_path = tmp_path / "resources.db"
    initialize_schema(db_path)
    with get_connection(db_path) as conn:
        conn.execute("INSERT INTO user (id, username) VALUES (1, 'alice')")
        conn.commit()
    repo = ResourceRepo(db_path)
    for creator_id in (1, 2, 2):
        repo.create(CreateResource(filename="f.txt", type="text/plain", size=1, creator_id=creator_id))
    return repo, db_path


def test_run_commits_all_passes(tmp_path: Path) -> None:
    repo, db_path = _bootstrap(tmp_path)

    def vacuum_memos(conn: sqlite3.Connection) -> int:
        return conn.execute("DELETE FROM memo WHERE creator_id NOT IN (SELECT id FROM user)").rowcount

    with get_connection(db_path) as conn:
        conn.execute("INSERT INTO memo (creator_id) VALUES (2)")
        conn.commit()

    summary = VacuumService(db_path, [("resource", repo.vacuum), ("memo", vacuum_memos)]).run()

    assert summary.removed == {"resource": 2, "memo": 1}
    assert summary.total == 3
    assert {r.creator_id for r in repo.list(FindResource())} == {1}


def test_run_rolls_back_every_pass_on_failure(tmp_path: Path) -> None:
    repo, db_path = _bootstrap(tmp_path)

    def failing_pass(conn: sqlite3.Connection) -> int:
        raise sqlite3.OperationalError("no such table: attachment")

    service = VacuumService(db_path, [("resource", repo.vacuum), ("attachment", failing_pass)])

    with pytest.raises(sqlite3.OperationalError):
        service.run()

    assert len(repo.list(FindResource())) == 3
