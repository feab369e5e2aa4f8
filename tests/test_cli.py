"""
Tests for the errchain CLI (errchain.cli.main), driven through click's CliRunner.
"""

import json

import pytest
from click.testing import CliRunner

from errchain import serialize
from errchain.cli.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def chain_file(tmp_path, three_level_bytes):
    path = tmp_path / "chain.bin"
    path.write_bytes(three_level_bytes)
    return path


class TestShow:
    """errchain show"""

    def test_display_from_file(self, runner, chain_file):
        result = runner.invoke(cli, ["show", str(chain_file)])
        assert result.exit_code == 0
        assert result.output == (
            "@ errors_test.go:19; \n"
            "\t@ errors_test.go:18; getErrorForSerialization\n"
            "\t@ errors_test.go:17; things are gonna be bad\n"
        )

    def test_log_format(self, runner, chain_file):
        result = runner.invoke(cli, ["show", "-f", "log", str(chain_file)])
        assert result.exit_code == 0
        assert result.output.count("; @ ") == 2

    def test_json_format(self, runner, chain_file):
        result = runner.invoke(cli, ["show", "--format", "json", str(chain_file)])
        assert result.exit_code == 0
        doc = json.loads(result.output)
        assert doc["kind"] == 3
        assert doc["previous"]["previous"]["error"] == "things are gonna be bad"

    def test_dsv_format(self, runner, chain_file):
        result = runner.invoke(cli, ["show", "-f", "dsv", str(chain_file)])
        assert result.exit_code == 0
        assert result.output.startswith("003\x1ferrors_test.go:19\x1f\x1e002")

    def test_stdin(self, runner, three_level_bytes):
        result = runner.invoke(cli, ["show"], input=three_level_bytes)
        assert result.exit_code == 0
        assert "getErrorForSerialization" in result.output

    def test_hex_input(self, runner, three_level_bytes):
        hex_text = three_level_bytes.hex() + "\n"
        result = runner.invoke(cli, ["show", "--hex"], input=hex_text.encode())
        assert result.exit_code == 0
        assert "things are gonna be bad" in result.output

    def test_invalid_hex(self, runner):
        result = runner.invoke(cli, ["show", "--hex"], input=b"zz")
        assert result.exit_code == 2
        assert "invalid hex input" in result.output

    def test_json_format_deep_chain(self, runner, tmp_path, deep_chain):
        path = tmp_path / "deep.bin"
        path.write_bytes(serialize(deep_chain))
        result = runner.invoke(cli, ["show", "-f", "json", str(path)])
        assert result.exception is None
        assert result.exit_code == 0
        assert result.output.count('"previous":') == 4999
        assert result.output.rstrip("\n").endswith("}" * 5000)

    def test_truncated_input_still_prints(self, runner, three_level_bytes):
        result = runner.invoke(cli, ["show"], input=three_level_bytes[:-5])
        assert result.exit_code == 0
        assert "@ errors_test.go:17; " in result.output


class TestHas:
    """errchain has"""

    def test_found(self, runner, chain_file):
        result = runner.invoke(cli, ["has", "2", str(chain_file)])
        assert result.exit_code == 0
        assert result.output.startswith("@ errors_test.go:18; getErrorForSerialization")

    def test_not_found(self, runner, chain_file):
        result = runner.invoke(cli, ["has", "9", str(chain_file)])
        assert result.exit_code == 1
        assert "kind 9 not found" in result.output

    def test_negative_kind(self, runner, tmp_path):
        path = tmp_path / "neg.bin"
        path.write_bytes(b"\x01\x00\x04oops")
        result = runner.invoke(cli, ["has", "--", "-1", str(path)])
        assert result.exit_code == 0
        assert result.output == "oops\n"


class TestLoggingConfig:
    """Environment-driven logging setup."""

    def test_unknown_log_level_exits(self, runner, chain_file, monkeypatch):
        monkeypatch.setenv("ERRCHAIN_LOG_LEVEL", "LOUD")
        result = runner.invoke(cli, ["show", str(chain_file)])
        assert result.exit_code == 2
        assert "Unknown log level" in result.output
