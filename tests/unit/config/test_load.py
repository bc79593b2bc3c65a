from pathlib import Path

import pytest

from hyperv.config import Config, safe_load_config


class TestSafeLoadConfig:
    def test_returns_config_without_error(
        self, hyperv_home: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config, error = safe_load_config()

        assert isinstance(config, Config)
        assert error is None

    def test_invalid_file_falls_back_to_defaults(
        self, hyperv_home: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        (hyperv_home / "config.toml").write_text("[supervisor\n")

        config, error = safe_load_config()

        assert config == Config()
        assert error is not None
        assert "Warning:" in capsys.readouterr().err

    def test_strict_mode_exits(
        self, hyperv_home: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (hyperv_home / "config.toml").write_text(
            "[supervisor]\nshutdown_timeout = -5\n"
        )
        monkeypatch.setenv("HYPERV_STRICT_CONFIG", "1")

        with pytest.raises(SystemExit) as exc_info:
            _ = safe_load_config()

        assert exc_info.value.code == 1

    def test_explicit_missing_path_exits(self, hyperv_home: Path) -> None:
        with pytest.raises(SystemExit):
            _ = safe_load_config(config_path=hyperv_home / "missing.toml")

    def test_cli_overrides_apply(self, hyperv_home: Path) -> None:
        config, _ = safe_load_config(cli_overrides={"logging": {"level": "debug"}})

        assert config.logging.level.value == "debug"
