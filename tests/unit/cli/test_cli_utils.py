import logging
from unittest.mock import Mock, call

import pytest
import typer
from typer.testing import CliRunner

from aerochat.cli.cli_utils import (
    CONFIG_FLAGS,
    CONTEXT_ALLOW_EXTRA_ARGS,
    LOG_LEVEL_TYPE,
    LogLevel,
    load_chat_config,
    parse_extra_cli_args,
    section_header,
)
from aerochat.utils.logging import get_logger
from tests import get_testdata_dir


def simple_command(ctx: typer.Context):
    print(str(parse_extra_cli_args(ctx)))


def log_level_command(level: LOG_LEVEL_TYPE = None):
    print("done")


runner = CliRunner()


#
# Fixtures
#
@pytest.fixture
def app():
    fake_app = typer.Typer()
    fake_app.command(context_settings=CONTEXT_ALLOW_EXTRA_ARGS)(simple_command)
    yield fake_app


def test_config_flags():
    # Simple test to ensure that this constant isn't changed accidentally.
    assert CONFIG_FLAGS == ["--config", "-c"]


def test_context_allow_extra_args():
    # Simple test to ensure that this constant isn't changed accidentally.
    assert CONTEXT_ALLOW_EXTRA_ARGS == {
        "allow_extra_args": True,
        "ignore_unknown_options": True,
    }


def test_parse_extra_cli_args_space_separated(app):
    # Verify that results are in the proper dot format.
    result = runner.invoke(
        app, ["--max_replay_messages", "10", "--remote.api_key", "abc"]
    )
    expected_result = ["max_replay_messages=10", "remote.api_key=abc"]
    assert result.output.strip() == str(expected_result).strip()


def test_parse_extra_cli_args_eq_separated(app):
    # Verify that results are in the proper dot format.
    result = runner.invoke(app, ["--max_replay_messages=10", "--log_level=debug"])
    expected_result = ["max_replay_messages=10", "log_level=debug"]
    assert result.output.strip() == str(expected_result).strip()


def test_parse_extra_cli_args_mixed(app):
    # Verify that results are in the proper dot format.
    result = runner.invoke(
        app, ["--config=some/path", "--foo ", " bar ", "--bazz = 12345 ", "--zz=XYZ"]
    )
    expected_result = ["config=some/path", "foo=bar", "bazz=12345", "zz=XYZ"]
    assert result.output.strip() == str(expected_result).strip()


def test_parse_extra_cli_args_empty(app):
    result = runner.invoke(app, [])
    expected_result = "[]"
    assert result.output.strip() == str(expected_result).strip()


def test_parse_extra_cli_args_fails_for_odd_args(app):
    result = runner.invoke(app, ["--storage_dir", "some/path", "--odd"])
    output_str = result.output.strip()
    assert "Trailing argument has no value assigned" in output_str, f"{output_str}"


def test_parse_extra_cli_args_fails_without_dashes(app):
    result = runner.invoke(app, ["--foo", "bar", "baz"])
    assert result.exit_code != 0


def test_valid_log_levels():
    # Verify that the log levels are valid.
    expected_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    supported_levels = set(LogLevel.__members__.keys())
    assert expected_levels == supported_levels


def test_log_level_option():
    fake_app = typer.Typer()
    fake_app.command()(log_level_command)
    result = runner.invoke(fake_app, ["--log-level", "debug"])
    assert result.exit_code == 0
    assert "Set log level to DEBUG" in result.output
    assert get_logger("aerochat").level == logging.DEBUG


def test_section_header():
    """Test the section_header function."""

    # Create a mock console
    mock_console = Mock()
    mock_console.width = 10

    # Call the function with a test message
    test_message = "Test Header"
    section_header(test_message, console=mock_console)

    # Assert that the console's print method was called with the correct message
    mock_console.print.assert_has_calls(
        [
            call("\n[blue]━━━━━━━━━━[/blue]"),
            call("[yellow]   Test Header[/yellow]"),
            call("[blue]━━━━━━━━━━[/blue]\n"),
        ]
    )


def test_load_chat_config_defaults():
    config = load_chat_config(None)
    assert config.storage_dir == "~/.aerochat"
    assert config.max_replay_messages is None


def test_load_chat_config_from_file_with_overrides(tmp_path):
    config = load_chat_config(
        str(get_testdata_dir() / "configs" / "chat.yaml"),
        storage_dir=str(tmp_path),
        extra_args=["max_replay_messages=5"],
    )
    assert config.storage_dir == str(tmp_path)
    assert config.max_replay_messages == 5
    assert config.remote.connection_timeout == 120.0


def test_load_chat_config_invalid_override():
    with pytest.raises(ValueError, match="Max replay messages"):
        load_chat_config(None, extra_args=["max_replay_messages=-3"])
