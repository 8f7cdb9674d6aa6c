from pathlib import Path

from resourcestore.core.config import DEFAULT_DATA_DIRNAME, load_paths


def test_load_paths_defaults_under_project_root(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("RESOURCESTORE_HOME", raising=False)

    paths = load_paths(tmp_path)

    assert paths.project_root == tmp_path.resolve()
    assert paths.data_dir == tmp_path.resolve() / DEFAULT_DATA_DIRNAME
    assert paths.db_path == paths.data_dir / "resources.db"


def test_load_paths_honours_home_override(tmp_path: Path, monkeypatch) -> None:
    home = tmp_path / "elsewhere"
    monkeypatch.setenv("RESOURCESTORE_HOME", str(home))

    paths = load_paths(tmp_path / "project")

    assert paths.data_dir == home.resolve()
    assert paths.db_path == home.resolve() / "resources.db"
