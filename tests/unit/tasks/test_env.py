from pathlib import Path

import pytest
from hypothesis import given
from hypothesis import strategies as st

from hyperv.exceptions import InvalidEnvVarError
from hyperv.tasks import Task, load_env_file, parse_env_assignments, resolve_task_env


class TestParseEnvAssignments:
    def test_splits_on_first_equals(self) -> None:
        env = parse_env_assignments(["A=1", "URL=postgres://h/db?x=y", "EMPTY="])

        assert env == {"A": "1", "URL": "postgres://h/db?x=y", "EMPTY": ""}

    def test_later_assignment_wins(self) -> None:
        assert parse_env_assignments(["A=1", "A=2"]) == {"A": "2"}

    @pytest.mark.parametrize("assignment", ["NOEQUALS", "=value"])
    def test_rejects_malformed_entries(self, assignment: str) -> None:
        with pytest.raises(InvalidEnvVarError) as exc_info:
            _ = parse_env_assignments([assignment])

        assert exc_info.value.assignment == assignment

    @given(
        key=st.text(alphabet=st.characters(blacklist_characters="=\x00"), min_size=1),
        value=st.text(),
    )
    def test_value_is_everything_after_first_equals(self, key: str, value: str) -> None:
        assert parse_env_assignments([f"{key}={value}"]) == {key: value}


class TestResolveTaskEnv:
    def test_explicit_env_overrides_dotenv(self, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text("SHARED=from-file\nONLY_FILE=yes\n")
        task = Task(
            id="id",
            name="t",
            binary="/bin/true",
            env={"SHARED": "explicit"},
            workdir=str(tmp_path),
        )

        env = resolve_task_env(task)

        assert env == {"SHARED": "explicit", "ONLY_FILE": "yes"}

    def test_no_workdir_uses_explicit_env_only(self) -> None:
        task = Task(id="id", name="t", binary="/bin/true", env={"A": "1"})

        assert resolve_task_env(task) == {"A": "1"}

    def test_missing_env_file_is_empty(self, tmp_path: Path) -> None:
        assert load_env_file(tmp_path) == {}

    def test_skips_keys_without_values(self, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text("BARE\nSET=1\n")

        assert load_env_file(tmp_path) == {"SET": "1"}
