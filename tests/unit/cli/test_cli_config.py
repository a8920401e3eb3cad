import json

import pytest
from typer.testing import CliRunner

from aerochat.cli.main import get_app
from aerochat.core.constants import DEV_CONFIG_STORAGE_KEY, DEV_MODE_STORAGE_KEY

runner = CliRunner()


#
# Fixtures
#
@pytest.fixture
def app():
    yield get_app()


def _stored_dev_config(storage_dir) -> dict:
    return json.loads((storage_dir / f"{DEV_CONFIG_STORAGE_KEY}.json").read_text())


#
# Tests
#
def test_config_show_defaults(app, tmp_path):
    result = runner.invoke(app, ["config", "show", "--storage-dir", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "Developer mode: off" in result.output
    assert "temperature: 1.0" in result.output
    assert "safety_threshold: BLOCK_MEDIUM_AND_ABOVE" in result.output
    # Showing does not write anything.
    assert not list(tmp_path.iterdir())


def test_config_set(app, tmp_path):
    result = runner.invoke(
        app,
        [
            "config",
            "set",
            "temperature=0.3",
            "tools.google_search=true",
            "--storage-dir",
            str(tmp_path),
        ],
    )
    assert result.exit_code == 0, result.output
    assert "temperature: 0.3" in result.output
    stored = _stored_dev_config(tmp_path)
    assert stored["temperature"] == 0.3
    assert stored["tools"]["google_search"] is True

    result = runner.invoke(app, ["config", "show", "--storage-dir", str(tmp_path)])
    assert "temperature: 0.3" in result.output


def test_config_set_invalid_value(app, tmp_path):
    result = runner.invoke(
        app, ["config", "set", "temperature=5", "--storage-dir", str(tmp_path)]
    )
    assert result.exit_code == 1
    assert "Invalid developer configuration" in result.output
    assert not (tmp_path / f"{DEV_CONFIG_STORAGE_KEY}.json").exists()


def test_config_set_unknown_key(app, tmp_path):
    result = runner.invoke(
        app, ["config", "set", "not_a_field=1", "--storage-dir", str(tmp_path)]
    )
    assert result.exit_code == 1
    assert "Invalid developer configuration" in result.output


def test_config_set_requires_key_value(app, tmp_path):
    result = runner.invoke(
        app, ["config", "set", "temperature", "--storage-dir", str(tmp_path)]
    )
    assert result.exit_code == 2
    assert "KEY=VALUE" in result.output


def test_config_reset(app, tmp_path):
    runner.invoke(
        app, ["config", "set", "top_p=0.1", "--storage-dir", str(tmp_path)]
    )
    result = runner.invoke(app, ["config", "reset", "--storage-dir", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "top_p: 0.95" in result.output
    assert _stored_dev_config(tmp_path)["top_p"] == 0.95


@pytest.mark.parametrize(
    "args,expected",
    [
        (["dev", "on"], "true"),
        (["dev", "off"], "false"),
        (["dev"], "true"),
    ],
)
def test_dev(app, tmp_path, args, expected):
    result = runner.invoke(app, args + ["--storage-dir", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert (tmp_path / f"{DEV_MODE_STORAGE_KEY}.json").read_text() == expected


def test_dev_toggle_twice(app, tmp_path):
    runner.invoke(app, ["dev", "--storage-dir", str(tmp_path)])
    result = runner.invoke(app, ["dev", "toggle", "--storage-dir", str(tmp_path)])
    assert "Developer mode: off" in result.output
