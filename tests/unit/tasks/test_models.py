from hyperv.tasks import Task, TaskStatus


def _task(**overrides: object) -> Task:
    fields: dict[str, object] = {
        "id": "3f2a9c1e-0000-4000-8000-000000000000",
        "name": "web",
        "binary": "/bin/true",
    }
    fields.update(overrides)
    return Task(**fields)  # pyright: ignore[reportArgumentType]


class TestTaskDefaults:
    def test_new_task_is_stopped_with_zero_counters(self) -> None:
        task = _task()

        assert task.status is TaskStatus.STOPPED
        assert task.pid is None
        assert task.restart_count == 0
        assert task.last_exit_code is None
        assert task.args == []
        assert task.env == {}
        assert task.created_at

    def test_short_id(self) -> None:
        assert _task().short_id == "3f2a9c1e"


class TestTaskTransitions:
    def test_mark_running_sets_pid_and_timestamp(self) -> None:
        task = _task()

        task.mark_running(1234)

        assert task.status is TaskStatus.RUNNING
        assert task.pid == 1234
        assert task.last_started is not None

    def test_mark_stopped_clears_pid(self) -> None:
        task = _task(status=TaskStatus.RUNNING, pid=1234)

        task.mark_stopped()

        assert task.status is TaskStatus.STOPPED
        assert task.pid is None

    def test_mark_failed_records_exit_code(self) -> None:
        task = _task(status=TaskStatus.RUNNING, pid=1234)

        task.mark_failed(3)

        assert task.status is TaskStatus.FAILED
        assert task.pid is None
        assert task.last_exit_code == 3

    def test_mark_failed_without_code_keeps_previous(self) -> None:
        task = _task(last_exit_code=1)

        task.mark_failed()

        assert task.last_exit_code == 1


class TestTaskMatches:
    def test_matches_name_id_and_prefix(self) -> None:
        task = _task()

        assert task.matches("web")
        assert task.matches(task.id)
        assert task.matches("3f2a")
        assert not task.matches("api")
        assert not task.matches("2a9c")


class TestTaskStatus:
    def test_values_and_icons(self) -> None:
        assert [s.value for s in TaskStatus] == ["stopped", "running", "failed"]
        assert TaskStatus.RUNNING.icon == "🟢"
        assert TaskStatus.STOPPED.icon == "🔴"
        assert TaskStatus.FAILED.icon == "🟡"
