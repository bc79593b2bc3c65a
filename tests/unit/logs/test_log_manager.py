from pathlib import Path
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture
from rich.console import Console

from hyperv.logs import LOG_NOT_FOUND, LogManager, LogType


@pytest.fixture
def logs(tmp_path: Path) -> tuple[Path, Path]:
    out, err = tmp_path / "stdout.log", tmp_path / "stderr.log"
    out.write_text("".join(f"out {i}\n" for i in range(10)))
    err.write_text("".join(f"err {i}\n" for i in range(10)))
    return out, err


class TestShowLogs:
    def test_stdout_tail(self, console: Console, logs: tuple[Path, Path]) -> None:
        with console.capture() as capture:
            LogManager(console).show_logs(*logs, LogType.STDOUT, 2)

        assert capture.get().splitlines() == ["=== STDOUT ===", "out 8", "out 9"]

    def test_stderr_tail(self, console: Console, logs: tuple[Path, Path]) -> None:
        with console.capture() as capture:
            LogManager(console).show_logs(*logs, LogType.STDERR, 1)

        assert capture.get().splitlines() == ["=== STDERR ===", "err 9"]

    def test_both_splits_line_budget(
        self, console: Console, logs: tuple[Path, Path]
    ) -> None:
        with console.capture() as capture:
            LogManager(console).show_logs(*logs, LogType.BOTH, 4)

        assert capture.get().splitlines() == [
            "=== STDOUT ===",
            "out 8",
            "out 9",
            "",
            "=== STDERR ===",
            "err 8",
            "err 9",
        ]

    def test_missing_log_placeholder(self, console: Console, tmp_path: Path) -> None:
        with console.capture() as capture:
            LogManager(console).show_logs(
                tmp_path / "a.log", tmp_path / "b.log", LogType.STDOUT, 5
            )

        assert LOG_NOT_FOUND in capture.get()

    def test_markup_is_printed_literally(
        self, console: Console, tmp_path: Path
    ) -> None:
        out = tmp_path / "stdout.log"
        out.write_text("[bold]not markup[/bold]\n")

        with console.capture() as capture:
            LogManager(console).show_logs(out, tmp_path / "e", LogType.STDOUT, 5)

        assert "[bold]not markup[/bold]" in capture.get()


class TestFollow:
    @pytest.fixture
    def follow_log(self, mocker: MockerFixture) -> MagicMock:
        return mocker.patch("hyperv.logs._manager.follow_log")

    @pytest.fixture
    def follow_both(self, mocker: MockerFixture) -> MagicMock:
        return mocker.patch("hyperv.logs._manager.follow_both_logs")

    def test_follows_selected_stream(
        self,
        console: Console,
        logs: tuple[Path, Path],
        follow_log: MagicMock,
        follow_both: MagicMock,
    ) -> None:
        with console.capture() as capture:
            LogManager(console, poll_interval=0.5).show_logs(
                *logs, LogType.STDERR, 1, follow=True
            )

        assert "=== Following STDERR (Ctrl+C to stop) ===" in capture.get()
        assert follow_log.call_args.args[0] == logs[1]
        assert follow_log.call_args.args[2] == 0.5
        follow_both.assert_not_called()

    def test_follows_both_streams(
        self,
        console: Console,
        logs: tuple[Path, Path],
        follow_log: MagicMock,
        follow_both: MagicMock,
    ) -> None:
        with console.capture() as capture:
            LogManager(console).show_logs(*logs, LogType.BOTH, 2, follow=True)

        assert "=== Following logs (Ctrl+C to stop) ===" in capture.get()
        assert follow_both.call_args.args[:2] == logs
        follow_log.assert_not_called()
