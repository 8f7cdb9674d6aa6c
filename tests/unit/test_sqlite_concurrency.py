from __future__ import annotations

import threading
import time
from pathlib import Path

import pytest

from resourcestore.infrastructure.db.sqlite import get_connection, initialize_schema, transaction


def test_connection_enables_wal_and_busy_timeout(tmp_path: Path) -> None:
    db_path = tmp_path / "resources.db"
    initialize_schema(db_path)

    with get_connection(db_path) as conn:
        journal_mode = conn.execute("PRAGMA journal_mode;").fetchone()[0]
        busy_timeout = conn.execute("PRAGMA busy_timeout;").fetchone()[0]

    assert str(journal_mode).lower() == "wal"
    assert int(busy_timeout) >= 30_000


def test_busy_timeout_env_override(tmp_path: Path, monkeypatch) -> None:
    db_path = tmp_path / "resources.db"
    monkeypatch.setenv("RESOURCESTORE_SQLITE_BUSY_TIMEOUT_MS", "1234")

    with get_connection(db_path) as conn:
        busy_timeout = conn.execute("PRAGMA busy_timeout;").fetchone()[0]

    assert int(busy_timeout) == 1234


def test_invalid_busy_timeout_env_falls_back(tmp_path: Path, monkeypatch) -> None:
    db_path = tmp_path / "resources.db"
    monkeypatch.setenv("RESOURCESTORE_SQLITE_BUSY_TIMEOUT_MS", "not-a-number")

    with get_connection(db_path) as conn:
        busy_timeout = conn.execute("PRAGMA busy_timeout;").fetchone()[0]

    assert int(busy_timeout) == 30_000


def test_transaction_rolls_back_on_error(tmp_path: Path) -> None:
    db_path = tmp_path / "resources.db"
    initialize_schema(db_path)

    conn = get_connection(db_path)
    with pytest.raises(RuntimeError):
        with transaction(conn):
            conn.execute("INSERT INTO user (username) VALUES ('temp')")
            raise RuntimeError("boom")
    conn.close()

    with get_connection(db_path) as check:
        count = check.execute("SELECT COUNT(*) FROM user").fetchone()[0]
    assert int(count) == 0


def test_write_waits_for_lock_instead_of_failing_immediately(tmp_path: Path) -> None:
    db_path = tmp_path / "resources.db"
    initialize_schema(db_path)

    writer_1 = get_connection(db_path)
    writer_1.execute("BEGIN IMMEDIATE;")
    writer_1.execute("INSERT INTO user (username) VALUES (?)", ("first",))

    out: dict[str, object] = {}

    def _writer_2() -> None:
        started = time.perf_counter()
        try:
            with get_connection(db_path) as conn_2:
                conn_2.execute("INSERT INTO user (username) VALUES (?)", ("second",))
                conn_2.commit()
            out["ok"] = True
        except Exception as exc:  # pragma: no cover
            out["ok"] = False
            out["error"] = str(exc)
        finally:
            out["elapsed"] = time.perf_counter() - started

    t = threading.Thread(target=_writer_2)
    t.start()
    time.sleep(0.25)
    writer_1.commit()
    writer_1.close()
    t.join(timeout=5)

    assert out.get("ok") is True, str(out.get("error"))
    assert float(out.get("elapsed", 0.0)) >= 0.2

    with get_connection(db_path) as conn:
        count = conn.execute("SELECT COUNT(*) FROM user").fetchone()[0]
    assert int(count) == 2
