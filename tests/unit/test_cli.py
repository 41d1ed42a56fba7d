"""
Unit tests for the sync-validate command line

Tests verify:
- Argument parsing and defaults
- Hive settings from options, environment and Vault
- The validate command end to end against on-disk metadata
"""

import json
from argparse import Namespace
from unittest.mock import patch

import pytest

from src.sync_validation.cli import create_parser, get_hive_config, main
from src.sync_validation.compare import StaticRowCounter
from src.sync_validation.modes import Mode


def hive_args(**overrides):
    values = dict(
        use_vault=False,
        vault_secret="hive",
        hive_host=None,
        hive_port=None,
        hive_user=None,
        hive_password=None,
        hive_driver=None,
    )
    values.update(overrides)
    return Namespace(**values)


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep the CLI from replacing pytest's log handlers."""
    with patch("src.sync_validation.cli.configure_from_env"), \
            patch("src.sync_validation.cli.setup_logging"):
        yield


@pytest.fixture
def tables(hoodie_table_dir):
    """Source with three commits, target that has only absorbed the first."""
    source = hoodie_table_dir("trips", {"20200101000000": 100, "20200102000000": 50, "20200103000000": 25})
    target_root = hoodie_table_dir("trips_synced", {"20200101000000": 100})
    return source, target_root


@pytest.fixture
def row_counter():
    counter = StaticRowCounter({"trips": 175, "trips_synced": 100})
    with patch("src.sync_validation.cli.commands.HiveRowCounter", return_value=counter) as mock_cls:
        counter.factory = mock_cls
        yield counter


def run_validate(source, target, *extra):
    argv = ["validate", "--source-path", str(source), "--target-path", str(target), *extra]
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


class TestParser:
    """Test argument parsing"""

    def test_validate_defaults(self):
        args = create_parser().parse_args(["validate", "--source-path", "/a", "--target-path", "/b"])

        assert args.command == "validate"
        assert args.mode == "complete"
        assert args.source_db == "rawdata"
        assert args.target_db == "dwh_hoodie"
        assert args.partition_count == 5
        assert args.partition_field == "datestr"
        assert args.query_retries == 2
        assert args.format == "console"
        assert args.fail_on_lag is False
        assert args.use_vault is False

    def test_global_options(self):
        args = create_parser().parse_args([
            "--log-level", "DEBUG", "--log-json",
            "validate", "--source-path", "/a", "--target-path", "/b",
        ])

        assert args.log_level == "DEBUG"
        assert args.log_json is True

    def test_missing_required_option(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["validate", "--source-path", "/a"])

        assert exc_info.value.code == 2
        assert "--target-path" in capsys.readouterr().err

    def test_negative_query_retries_rejected(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args([
                "validate", "--source-path", "/a", "--target-path", "/b", "--query-retries", "-1",
            ])

        assert exc_info.value.code == 2
        assert "must be >= 0" in capsys.readouterr().err

    def test_zero_query_retries_accepted(self):
        args = create_parser().parse_args([
            "validate", "--source-path", "/a", "--target-path", "/b", "--query-retries", "0",
        ])

        assert args.query_retries == 0


class TestGetHiveConfig:
    """Test Hive settings resolution"""

    def test_from_arguments(self):
        config = get_hive_config(hive_args(
            hive_host="hive.internal",
            hive_port=10001,
            hive_user="etl",
            hive_password="pw",
            hive_driver="Hive",
        ))

        assert config == {
            "host": "hive.internal",
            "port": 10001,
            "username": "etl",
            "password": "pw",
            "driver": "Hive",
        }

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("HIVE_HOST", "hive-env")
        monkeypatch.setenv("HIVE_PORT", "10002")
        monkeypatch.setenv("HIVE_USER", "env_user")
        monkeypatch.setenv("HIVE_PASSWORD", "env_pw")
        monkeypatch.setenv("HIVE_ODBC_DRIVER", "Env Driver")

        config = get_hive_config(hive_args())

        assert config == {
            "host": "hive-env",
            "port": 10002,
            "username": "env_user",
            "password": "env_pw",
            "driver": "Env Driver",
        }

    def test_missing_password_exits(self, monkeypatch):
        monkeypatch.delenv("HIVE_PASSWORD", raising=False)

        with pytest.raises(SystemExit) as exc_info:
            get_hive_config(hive_args())

        assert exc_info.value.code == 1

    def test_from_vault(self):
        with patch("src.sync_validation.cli.credentials.VaultClient") as mock_vault:
            mock_vault.return_value.get_hive_credentials.return_value = {
                "host": "hive.vault",
                "port": 10000,
                "username": "vault_user",
                "password": "vault_pw",
            }

            config = get_hive_config(hive_args(use_vault=True, vault_secret="prod"))

        mock_vault.return_value.get_hive_credentials.assert_called_once_with("prod")
        assert config["host"] == "hive.vault"
        assert config["password"] == "vault_pw"

    def test_vault_failure_exits(self):
        with patch("src.sync_validation.cli.credentials.VaultClient") as mock_vault:
            mock_vault.return_value.get_hive_credentials.side_effect = ValueError("Secret not found")

            with pytest.raises(SystemExit) as exc_info:
                get_hive_config(hive_args(use_vault=True))

        assert exc_info.value.code == 1


class TestValidateCommand:
    """Test the validate command"""

    def test_console_report(self, tables, row_counter, capsys):
        code = run_validate(*tables)

        out = capsys.readouterr().out
        assert code == 0
        assert "OUT OF SYNC" in out
        assert "Count difference now is (count(trips) - count(trips_synced)) == 75. Catch up count is 75" in out

    def test_json_report(self, tables, row_counter, capsys):
        code = run_validate(*tables, "--format", "json")

        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["behind_table"] == "trips_synced"
        assert data["pending_commits"] == ["20200102000000", "20200103000000"]
        assert data["catch_up_record_count"] == 75

    def test_counter_built_from_options(self, tables, row_counter):
        run_validate(*tables, "--partition-field", "ds", "--query-retries", "4")

        kwargs = row_counter.factory.call_args.kwargs
        assert kwargs["partition_field"] == "ds"
        assert kwargs["max_retries"] == 4

    def test_latest_partitions_mode(self, tables, row_counter):
        run_validate(*tables, "--mode", "latest-partitions", "--partition-count", "3")

        assert row_counter.calls == [
            ("trips", Mode.LATEST_PARTITIONS, 3),
            ("trips_synced", Mode.LATEST_PARTITIONS, 3),
        ]

    def test_output_file(self, tables, row_counter, tmp_path):
        output = tmp_path / "out" / "report.json"

        run_validate(*tables, "--output", str(output))

        assert json.loads(output.read_text())["count_difference"] == 75

    def test_fail_on_lag(self, tables, row_counter):
        assert run_validate(*tables, "--fail-on-lag") == 1

    def test_fail_on_lag_when_in_sync(self, hoodie_table_dir, capsys):
        source = hoodie_table_dir("trips", {"1": 10})
        target = hoodie_table_dir("trips_synced", {"1": 10})
        counter = StaticRowCounter({"trips": 10, "trips_synced": 10})

        with patch("src.sync_validation.cli.commands.HiveRowCounter", return_value=counter):
            code = run_validate(source, target, "--fail-on-lag")

        assert code == 0
        assert "IN SYNC" in capsys.readouterr().out

    def test_missing_metadata_exits(self, tables, tmp_path, row_counter):
        code = run_validate(tables[0], tmp_path / "does_not_exist")

        assert code == 1
        assert row_counter.calls == []

    def test_undecodable_metadata_exits(self, tables, row_counter):
        source, target = tables
        (target / ".hoodie" / "20200102000000.commit").write_bytes(b"\xff\xfe")

        assert run_validate(source, target) == 1
        assert row_counter.calls == []

    def test_invalid_mode_exits(self, tables, row_counter):
        assert run_validate(*tables, "--mode", "sampled") == 1

    def test_query_failure_exits(self, tables):
        with patch(
            "src.sync_validation.cli.commands.HiveRowCounter",
            return_value=StaticRowCounter({"trips": 1}),
        ):
            assert run_validate(*tables) == 1

    def test_metrics_pushed(self, tables, row_counter):
        with patch("src.sync_validation.cli.commands.push_metrics") as mock_push:
            run_validate(*tables, "--pushgateway", "pushgateway:9091")

        assert mock_push.call_args[0][0] == "pushgateway:9091"
        registry = mock_push.call_args.kwargs["registry"]
        labels = {"source_table": "trips", "target_table": "trips_synced"}
        assert registry.get_sample_value("sync_validation_catch_up_records", labels) == 75
        assert registry.get_sample_value(
            "sync_validation_runs_total", {**labels, "status": "success"}
        ) == 1.0

    def test_metrics_pushed_on_failure(self, tables, tmp_path):
        with patch("src.sync_validation.cli.commands.push_metrics") as mock_push:
            code = run_validate(tables[0], tmp_path / "missing", "--pushgateway", "pushgateway:9091")

        assert code == 1
        mock_push.assert_called_once()

    def test_tracing_initialized_with_endpoint(self, tables, row_counter):
        with patch("src.sync_validation.cli.commands.initialize_tracing") as mock_init, \
                patch("src.sync_validation.cli.commands.shutdown_tracing") as mock_shutdown:
            run_validate(*tables, "--otlp-endpoint", "collector:4317")

        mock_init.assert_called_once_with(otlp_endpoint="collector:4317")
        mock_shutdown.assert_called_once()


class TestMain:
    """Test the entry point"""

    def test_no_command_prints_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 1
        assert "sync-validate" in capsys.readouterr().out

    def test_log_options_use_setup_logging(self, tables, row_counter):
        with patch("src.sync_validation.cli.setup_logging") as mock_setup:
            with pytest.raises(SystemExit):
                main([
                    "--log-json", "--log-level", "DEBUG",
                    "validate", "--source-path", str(tables[0]), "--target-path", str(tables[1]),
                ])

        mock_setup.assert_called_once_with(level="DEBUG", log_file=None, json_format=True)

    def test_env_logging_by_default(self, tables, row_counter):
        with patch("src.sync_validation.cli.configure_from_env") as mock_configure:
            run_validate(*tables)

        mock_configure.assert_called_once_with(level=None)
