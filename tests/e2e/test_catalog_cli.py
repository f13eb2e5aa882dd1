from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from adapters.main_cli import main
from adapters.serve_cli import ServeCLI
from adapters.serve_cli import setup_argument_parser as serve_parser
from adapters.version_cli import VersionCLI
from adapters.version_cli import setup_argument_parser as version_parser
from domain.errors import CollaboratorFailureError


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("BIND_ADDR", "CATALOG_DATA_DIR", "ENABLE_PRIVATE_ENDPOINTS"):
        monkeypatch.delenv(name, raising=False)


class TestServeCLI:
    """Test the serve subcommand."""

    @pytest.mark.e2e
    def test_setup_argument_parser(self) -> None:
        """Test argument parser defaults."""
        args = serve_parser().parse_args([])

        assert args.data_dir is None
        assert args.host is None
        assert args.port is None
        assert args.private is False

    @pytest.mark.e2e
    def test_run_starts_server(self, data_dir: Path) -> None:
        runner = MagicMock()
        cli = ServeCLI(runner=runner)

        exit_code = cli.run(["--data-dir", str(data_dir), "--port", "9000"])

        assert exit_code == 0
        runner.assert_called_once()
        _, kwargs = runner.call_args
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 9000
        assert kwargs["timeout_graceful_shutdown"] == 5.0
        app = runner.call_args.args[0]
        assert app.state.config.data_dir == str(data_dir)
        assert app.state.config.enable_private_endpoints is False

    @pytest.mark.e2e
    def test_private_flag(self, data_dir: Path) -> None:
        runner = MagicMock()

        ServeCLI(runner=runner).run(["--data-dir", str(data_dir), "--private"])

        app = runner.call_args.args[0]
        assert app.state.config.enable_private_endpoints is True

    @pytest.mark.e2e
    def test_server_error_exit_code(self, data_dir: Path) -> None:
        runner = MagicMock(side_effect=OSError("address in use"))

        assert ServeCLI(runner=runner).run(["--data-dir", str(data_dir)]) == 1


class TestVersionCLI:
    """Test the next-version subcommand."""

    @pytest.mark.e2e
    def test_setup_argument_parser(self) -> None:
        with pytest.raises(SystemExit):
            version_parser().parse_args([])

        args = version_parser().parse_args(["123", "2017"])
        assert (args.dataset_id, args.edition) == ("123", "2017")

    @pytest.mark.e2e
    def test_prints_next_version(
        self, data_dir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        exit_code = VersionCLI().run(["123", "2017", "--data-dir", str(data_dir)])

        assert exit_code == 0
        assert capsys.readouterr().out.strip() == "3"

    @pytest.mark.e2e
    def test_failure_exit_code(self) -> None:
        service = MagicMock()
        service.next_version.side_effect = CollaboratorFailureError("document store")

        assert VersionCLI(service=service).run(["123", "2017"]) == 1


class TestMainCLI:
    """Test subcommand dispatch."""

    @pytest.mark.e2e
    def test_dispatches_next_version(
        self, data_dir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        argv = ["catalog", "next-version", "456", "2021", "--data-dir", str(data_dir)]
        with patch("sys.argv", argv), patch("adapters.main_cli.setup_logger"), patch(
            "adapters.main_cli.setup_opentelemetry"
        ):
            exit_code = main()

        assert exit_code == 0
        assert capsys.readouterr().out.strip() == "2"

    @pytest.mark.e2e
    def test_unknown_subcommand(self) -> None:
        with patch("sys.argv", ["catalog", "import"]), patch(
            "adapters.main_cli.setup_logger"
        ), patch("adapters.main_cli.setup_opentelemetry"):
            with pytest.raises(SystemExit):
                main()


class TestASGIFactory:
    """Test the application factory used by standalone ASGI servers."""

    @pytest.mark.e2e
    def test_create_app_from_env(
        self, data_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from main import create_app_from_env

        monkeypatch.setenv("CATALOG_DATA_DIR", str(data_dir))
        monkeypatch.setenv("ENABLE_PRIVATE_ENDPOINTS", "true")

        app = create_app_from_env()

        assert app.state.config.data_dir == str(data_dir)
        assert app.state.config.enable_private_endpoints is True
