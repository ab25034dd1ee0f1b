from __future__ import annotations

import pytest

from quiz_runner.core import workspace


def test_ensure_workspace_creates_directories(tmp_path, monkeypatch):
    root = tmp_path / "data"
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(root))

    layout = workspace.ensure_workspace()

    assert layout.home == root.resolve()
    assert set(layout.directories) == {"config", "logs"}
    for name, path in layout.items():
        assert path.is_dir()
        assert layout.created[name] is True
    assert layout.created["home"] is True


def test_ensure_workspace_is_idempotent(tmp_path):
    first = workspace.ensure_workspace(path=tmp_path / "again")
    second = workspace.ensure_workspace(path=tmp_path / "again")

    assert first.home == second.home
    assert not any(second.created.values())


def test_explicit_path_beats_env(tmp_path, monkeypatch):
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(tmp_path / "env"))

    layout = workspace.ensure_workspace(path=tmp_path / "explicit")

    assert layout.home == (tmp_path / "explicit").resolve()
    assert not (tmp_path / "env").exists()


def test_ensure_workspace_without_create(tmp_path):
    root = tmp_path / "deferred"

    layout = workspace.ensure_workspace(
        env={workspace.WORKSPACE_ENV: str(root)}, create=False
    )

    assert layout.home == root.resolve()
    assert not root.exists()
    assert not any(layout.created.values())


def test_workspace_that_is_a_file_fails(tmp_path):
    target = tmp_path / "file"
    target.write_text("x", encoding="utf-8")

    with pytest.raises(workspace.WorkspaceError):
        workspace.ensure_workspace(path=target)


def test_path_for_unknown_key(tmp_path):
    layout = workspace.ensure_workspace(path=tmp_path / "ws")

    with pytest.raises(KeyError):
        layout.path_for("rag_dbs")


def test_describe_layout_returns_mapping(tmp_path):
    root = tmp_path / "layout"

    mapping = workspace.describe_layout(env={workspace.WORKSPACE_ENV: str(root)})

    assert mapping["home"] == root.resolve()
    assert mapping["logs"] == root.resolve() / "logs"
    assert not root.exists()
