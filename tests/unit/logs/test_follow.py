from collections.abc import Callable
from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from hyperv.logs import (
    backup_path_for,
    follow_both_logs,
    follow_log,
    rotate_log_if_needed,
)

Action = Callable[[], None]


def _append(path: Path, text: str) -> Action:
    def _run() -> None:
        with path.open("a") as f:
            _ = f.write(text)

    return _run


@pytest.fixture
def script_sleep(mocker: MockerFixture) -> Callable[..., None]:
    """Replace the poll sleep with scripted file writes, then interrupt."""

    def _install(*actions: Action) -> None:
        pending = list(actions)

        def _sleep(_: float) -> None:
            if not pending:
                raise KeyboardInterrupt
            pending.pop(0)()

        _ = mocker.patch("hyperv.logs._follow.time.sleep", side_effect=_sleep)

    return _install


class TestFollowLog:
    def test_missing_file_emits_notice(self, tmp_path: Path) -> None:
        emitted: list[str] = []
        path = tmp_path / "missing.log"

        follow_log(path, emitted.append)

        assert emitted == [f"Log file not found: {path}"]

    def test_emits_only_new_complete_lines(
        self, tmp_path: Path, script_sleep: Callable[..., None]
    ) -> None:
        log = tmp_path / "out.log"
        log.write_text("old\n")
        script_sleep(_append(log, "new\npartial"), _append(log, " done\n"))
        emitted: list[str] = []

        with pytest.raises(KeyboardInterrupt):
            follow_log(log, emitted.append)

        assert emitted == ["new", "partial done"]

    def test_restarts_after_truncation(
        self, tmp_path: Path, script_sleep: Callable[..., None]
    ) -> None:
        log = tmp_path / "out.log"
        log.write_text("a long first line\n")
        script_sleep(lambda: log.write_text("b\n"), lambda: None)
        emitted: list[str] = []

        with pytest.raises(KeyboardInterrupt):
            follow_log(log, emitted.append)

        assert emitted == ["b"]

    def test_switches_to_new_file_after_rotation(
        self, tmp_path: Path, script_sleep: Callable[..., None]
    ) -> None:
        log = tmp_path / "stdout.log"
        log.write_text("".join(f"old{i}\n" for i in range(5)))

        def rotate_and_write() -> None:
            assert rotate_log_if_needed(log, max_size=1)
            _append(log, "new\n")()

        script_sleep(rotate_and_write, lambda: None, lambda: None)
        emitted: list[str] = []

        with pytest.raises(KeyboardInterrupt):
            follow_log(log, emitted.append)

        assert emitted == ["new"]
        assert backup_path_for(log).read_text().startswith("old0\n")


class TestFollowBothLogs:
    def test_labels_each_stream(
        self, tmp_path: Path, script_sleep: Callable[..., None]
    ) -> None:
        out, err = tmp_path / "stdout.log", tmp_path / "stderr.log"
        out.write_text("")
        err.write_text("")

        def write_both() -> None:
            _append(out, "o1\n")()
            _append(err, "e1\n")()

        script_sleep(write_both)
        emitted: list[str] = []

        with pytest.raises(KeyboardInterrupt):
            follow_both_logs(out, err, emitted.append)

        assert emitted == ["[OUT] o1", "[ERR] e1"]

    def test_skips_missing_stream(
        self, tmp_path: Path, script_sleep: Callable[..., None]
    ) -> None:
        out = tmp_path / "stdout.log"
        out.write_text("")
        script_sleep(_append(out, "hello\n"))
        emitted: list[str] = []

        with pytest.raises(KeyboardInterrupt):
            follow_both_logs(out, tmp_path / "stderr.log", emitted.append)

        assert emitted == ["[OUT] hello"]

    def test_no_sleep_while_output_flows(
        self, tmp_path: Path, script_sleep: Callable[..., None]
    ) -> None:
        out, err = tmp_path / "stdout.log", tmp_path / "stderr.log"
        out.write_text("")
        err.write_text("")
        script_sleep(_append(out, "1\n2\n3\n"))
        emitted: list[str] = []

        with pytest.raises(KeyboardInterrupt):
            follow_both_logs(out, err, emitted.append)

        assert emitted == ["[OUT] 1", "[OUT] 2", "[OUT] 3"]

    def test_follows_both_streams_across_rotation(
        self, tmp_path: Path, script_sleep: Callable[..., None]
    ) -> None:
        out, err = tmp_path / "stdout.log", tmp_path / "stderr.log"
        out.write_text("stale out\n" * 3)
        err.write_text("stale err\n" * 3)

        def rotate_both() -> None:
            for path in (out, err):
                assert rotate_log_if_needed(path, max_size=1)
            _append(out, "fresh out\n")()
            _append(err, "fresh err\n")()

        script_sleep(rotate_both, lambda: None)
        emitted: list[str] = []

        with pytest.raises(KeyboardInterrupt):
            follow_both_logs(out, err, emitted.append)

        assert emitted == ["[OUT] fresh out", "[ERR] fresh err"]
