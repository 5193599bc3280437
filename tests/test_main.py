"""
Тесты разбора аргументов командной строки и запуска.
"""

from unittest.mock import patch

import pytest

import main
from src.config.loader import ConfigError, Settings


class TestParseArgs:
    def test_no_args(self) -> None:
        assert main.parse_args([]) is None

    @pytest.mark.parametrize("argv", [["-c", "cfg.yaml"], ["--config", "cfg.yaml"], ["--config=cfg.yaml"]])
    def test_config_path(self, argv: list[str]) -> None:
        assert main.parse_args(argv) == "cfg.yaml"

    def test_missing_value(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main.parse_args(["-c"])
        assert exc_info.value.code == 1

    def test_unknown_argument(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main.parse_args(["--port", "80"])
        assert exc_info.value.code == 1

    def test_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main.parse_args(["-h"])
        assert exc_info.value.code == 0
        assert "--config" in capsys.readouterr().out


class TestMain:
    def test_config_error_exits(self) -> None:
        with patch("main.get_settings", side_effect=ConfigError("broken")), \
             patch("main.setup_logging"), \
             patch("main.uvicorn.run") as mock_run:
            with pytest.raises(SystemExit) as exc_info:
                main.main(["-c", "missing.json"])

        assert exc_info.value.code == 1
        mock_run.assert_not_called()

    def test_starts_server(self) -> None:
        settings = Settings()

        with patch("main.get_settings", return_value=settings) as mock_get, \
             patch("main.setup_logging"), \
             patch("main.uvicorn.run") as mock_run:
            main.main(["--config=cfg.json"])

        mock_get.assert_called_once_with("cfg.json")
        kwargs = mock_run.call_args.kwargs
        assert kwargs["host"] == settings.server.SERVER_ADDRESS
        assert kwargs["port"] == settings.server.SERVER_PORT
