"""Shared test fixtures for hyperv tests."""

import stat
from collections.abc import Callable
from pathlib import Path

import pytest
from rich.console import Console

from hyperv.supervisor import ProcessSupervisor
from hyperv.tasks import TaskManager, TaskRegistry

MakeScript = Callable[..., Path]


@pytest.fixture
def console() -> Console:
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )


@pytest.fixture
def hyperv_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HYPERV_HOME at an isolated directory."""
    home = tmp_path / "hyperv-home"
    home.mkdir()
    monkeypatch.setenv("HYPERV_HOME", str(home))
    monkeypatch.delenv("HYPERV_DEBUG", raising=False)
    monkeypatch.delenv("HYPERV_STRICT_CONFIG", raising=False)
    return home


@pytest.fixture
def make_script(tmp_path: Path) -> MakeScript:
    """Return a factory writing an executable shell script."""
    scripts_dir = tmp_path / "scripts"
    scripts_dir.mkdir()

    def _make(name: str, body: str, *, executable: bool = True) -> Path:
        path = scripts_dir / name
        path.write_text(f"#!/bin/sh\n{body}\n")
        if executable:
            path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP)
        return path

    return _make


@pytest.fixture
def registry(tmp_path: Path) -> TaskRegistry:
    return TaskRegistry(tmp_path / "tasks.json", tmp_path / "logs")


@pytest.fixture
def supervisor() -> ProcessSupervisor:
    return ProcessSupervisor(shutdown_timeout=0.2, kill_settle=0.05)


@pytest.fixture
def manager(registry: TaskRegistry, supervisor: ProcessSupervisor) -> TaskManager:
    return TaskManager(registry, supervisor, restart_delay=0)
