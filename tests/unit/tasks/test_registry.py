import uuid
from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from hyperv.exceptions import RegistryIOError, TaskExistsError, TaskNotFoundError
from hyperv.tasks import Task, TaskRegistry, TaskStatus


class TestCreate:
    def test_assigns_uuid_and_log_paths(
        self, registry: TaskRegistry, tmp_path: Path
    ) -> None:
        task = registry.create("web", "/bin/true", ["-x"], {"A": "1"}, None)

        assert str(uuid.UUID(task.id)) == task.id
        assert task.status is TaskStatus.STOPPED
        assert task.stdout_log_path == str(tmp_path / "logs" / task.id / "stdout.log")
        assert task.stderr_log_path == str(tmp_path / "logs" / task.id / "stderr.log")
        assert (tmp_path / "logs" / task.id).is_dir()

    def test_persists_immediately(self, registry: TaskRegistry) -> None:
        task = registry.create("web", "/bin/true")

        reloaded = TaskRegistry.open(registry.path, registry.logs_dir)

        assert [t.id for t in reloaded] == [task.id]

    def test_duplicate_name_leaves_registry_unchanged(
        self, registry: TaskRegistry
    ) -> None:
        _ = registry.create("web", "/bin/true")
        before = registry.path.read_bytes()

        with pytest.raises(TaskExistsError) as exc_info:
            _ = registry.create("web", "/bin/false")

        assert exc_info.value.name == "web"
        assert len(registry) == 1
        assert registry.path.read_bytes() == before

    def test_ids_are_unique(self, registry: TaskRegistry) -> None:
        ids = {registry.create(f"t{i}", "/bin/true").id for i in range(20)}

        assert len(ids) == 20


class TestFind:
    def test_by_name_id_and_prefix(self, registry: TaskRegistry) -> None:
        task = registry.create("web", "/bin/true")

        assert registry.find("web") is task
        assert registry.find(task.id) is task
        assert registry.find(task.id[:6]) is task
        assert registry.find("missing") is None

    def test_prefix_collision_returns_earliest(
        self, registry: TaskRegistry, mocker: MockerFixture
    ) -> None:
        ids = iter(
            [
                uuid.UUID("abc00000-0000-4000-8000-000000000001"),
                uuid.UUID("abc00000-0000-4000-8000-000000000002"),
            ]
        )
        _ = mocker.patch(
            "hyperv.tasks._registry.uuid.uuid4", side_effect=lambda: next(ids)
        )

        first = registry.create("first", "/bin/true")
        second = registry.create("second", "/bin/true")

        assert registry.find("abc") is first
        assert registry.find("abc") is registry.find("abc")
        assert registry.find(second.id) is second

    def test_get_raises_when_missing(self, registry: TaskRegistry) -> None:
        with pytest.raises(TaskNotFoundError) as exc_info:
            _ = registry.get("ghost")

        assert exc_info.value.identifier == "ghost"
        assert str(exc_info.value) == "Task 'ghost' not found"


class TestRemove:
    def test_removes_and_persists(self, registry: TaskRegistry) -> None:
        task = registry.create("web", "/bin/true")
        _ = registry.create("api", "/bin/true")

        removed = registry.remove(task.id)

        assert removed is task
        reloaded = TaskRegistry.open(registry.path, registry.logs_dir)
        assert [t.name for t in reloaded] == ["api"]

    def test_unknown_id_raises(self, registry: TaskRegistry) -> None:
        with pytest.raises(TaskNotFoundError):
            _ = registry.remove("nope")


class TestPersistence:
    def test_round_trip_preserves_order_and_fields(
        self, registry: TaskRegistry
    ) -> None:
        a = registry.create(
            "a", "/bin/a", ["1", "2"], {"K": "V"}, "/tmp", auto_restart=True
        )
        b = registry.create("b", "/bin/b")
        a.mark_running(99)
        a.restart_count = 3
        registry.persist()

        reloaded = TaskRegistry.open(registry.path, registry.logs_dir).tasks

        assert [t.name for t in reloaded] == ["a", "b"]
        assert reloaded[0] == a
        assert reloaded[0].status is TaskStatus.RUNNING
        assert reloaded[1] == b

    def test_uses_snake_case_json(self, registry: TaskRegistry) -> None:
        _ = registry.create("a", "/bin/a", auto_restart=True)

        content = registry.path.read_text()

        assert '"auto_restart": true' in content
        assert '"status": "stopped"' in content
        assert '"restart_count": 0' in content

    @pytest.mark.parametrize(
        "content",
        [b"", b"{not json", b'{"tasks": []}', b'[{"name": "missing fields"}]'],
    )
    def test_malformed_file_loads_empty(
        self, registry: TaskRegistry, content: bytes
    ) -> None:
        registry.path.write_bytes(content)

        registry.load()

        assert len(registry) == 0

    def test_missing_file_loads_empty(self, tmp_path: Path) -> None:
        registry = TaskRegistry.open(tmp_path / "none.json", tmp_path / "logs")

        assert registry.tasks == []

    def test_write_failure_raises_registry_io_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        registry = TaskRegistry(blocker / "tasks.json", tmp_path / "logs")
        registry._tasks.append(Task(id="x", name="x", binary="/bin/true"))  # pyright: ignore[reportPrivateUsage]

        with pytest.raises(RegistryIOError) as exc_info:
            registry.persist()

        assert exc_info.value.path == blocker / "tasks.json"
