"""Tests for the saes-explore command line."""

import json

import pytest
from click.testing import CliRunner

from saes_explore import __version__
from saes_explore.cli import main
from saes_explore.config import load_settings
from saes_explore.explain import NOT_CONFIGURED_MESSAGE
from saes_explore.trace import TRACE_LENGTH


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


class TestBlockCommands:
    """encrypt / decrypt / keys."""

    def test_encrypt_defaults(self, runner) -> None:
        result = runner.invoke(main, ["encrypt"])
        assert result.exit_code == 0
        assert "Plaintext: D728" in result.output
        assert "Ciphertext: 24EC" in result.output

    def test_decrypt_defaults(self, runner) -> None:
        result = runner.invoke(main, ["decrypt"])
        assert result.exit_code == 0
        assert "Ciphertext: 24EC" in result.output
        assert "Plaintext: D728" in result.output

    def test_encrypt_second_vector(self, runner) -> None:
        result = runner.invoke(main, ["encrypt", "--input", "6f6b", "--key", "a73b"])
        assert result.exit_code == 0
        assert "Ciphertext: 0738" in result.output

    def test_invalid_hex_parses_to_zero(self, runner) -> None:
        result = runner.invoke(main, ["encrypt", "--input", "zz", "--key", "4AF5"])
        assert result.exit_code == 0
        assert "Plaintext: 0000" in result.output

    def test_verbose_table(self, runner) -> None:
        result = runner.invoke(main, ["encrypt", "-v"])
        assert result.exit_code == 0
        assert "Round 1: Mix Columns" in result.output
        assert "F633" in result.output

    def test_trace_file(self, runner, tmp_path) -> None:
        path = tmp_path / "run.jsonl"
        result = runner.invoke(main, ["decrypt", "--trace", str(path)])
        assert result.exit_code == 0
        records = [json.loads(line) for line in path.read_text().splitlines()]
        assert len(records) == TRACE_LENGTH
        assert records[0]["mode"] == "Decryption"
        assert records[-1]["state_hex"] == "D728"

    def test_keys(self, runner) -> None:
        result = runner.invoke(main, ["keys"])
        assert result.exit_code == 0
        assert "w2 = DD  (11011101)" in result.output
        assert "K1 = DD28" in result.output
        assert "K2 = 87AF" in result.output


class TestTraceCommand:
    """trace command formats."""

    def test_table(self, runner) -> None:
        result = runner.invoke(main, ["trace"])
        assert result.exit_code == 0
        assert "Ciphertext Output" in result.output

    def test_json_stdout(self, runner) -> None:
        result = runner.invoke(main, ["trace", "--mode", "decryption", "--format", "json"])
        assert result.exit_code == 0
        records = json.loads(result.output)
        assert [r["index"] for r in records] == list(range(TRACE_LENGTH))
        assert records[2]["id"] == "Add Round Key 2"

    def test_json_stdout_matches_file(self, runner, tmp_path) -> None:
        path = tmp_path / "trace.json"
        runner.invoke(main, ["trace", "--format", "json", "--output", str(path)])
        result = runner.invoke(main, ["trace", "--format", "json"])
        assert json.loads(result.output) == json.loads(path.read_text())

    def test_markdown_stdout(self, runner) -> None:
        result = runner.invoke(main, ["trace", "--format", "markdown"])
        assert result.exit_code == 0
        assert result.output.startswith("# S-AES Trace")

    def test_csv_requires_output(self, runner) -> None:
        result = runner.invoke(main, ["trace", "--format", "csv"])
        assert result.exit_code == 2
        assert "requires --output" in result.output

    @pytest.mark.parametrize("fmt, name", [("csv", "t.csv"), ("json", "t.json"), ("markdown", "t.md")])
    def test_export(self, runner, tmp_path, fmt, name) -> None:
        path = tmp_path / name
        result = runner.invoke(main, ["trace", "--format", fmt, "--output", str(path)])
        assert result.exit_code == 0
        assert path.exists()
        assert "Trace written to" in result.output


class TestOtherCommands:
    """walkthrough / explain / verify / version."""

    def test_walkthrough(self, runner, tmp_path) -> None:
        path = tmp_path / "walk.jsonl"
        result = runner.invoke(main, ["walkthrough", "--trace", str(path)])
        assert result.exit_code == 0
        assert "5. Summary" in result.output
        assert json.loads(path.read_text().splitlines()[-1])["output"] == "24EC"

    def test_explain_without_key(self, runner, no_api_key) -> None:
        result = runner.invoke(main, ["explain", "--step", "5"])
        assert result.exit_code == 0
        assert "Step 5: Round 1: Mix Columns" in result.output
        assert "State: F633" in result.output
        assert NOT_CONFIGURED_MESSAGE in result.output

    @pytest.mark.parametrize("name, value", [
        ("SAES_EXPLAIN_MAX_TOKENS", "lots"),
        ("SAES_EXPLAIN_MAX_TOKENS", "1"),
        ("SAES_EXPLAIN_TEMPERATURE", "warm"),
    ])
    def test_explain_with_malformed_settings(self, runner, no_api_key, monkeypatch, name, value) -> None:
        monkeypatch.setenv(name, value)
        load_settings.cache_clear()
        result = runner.invoke(main, ["explain", "--step", "3"])
        assert result.exit_code == 0
        assert "Step 3: Round 1: Sub Nibbles" in result.output
        assert NOT_CONFIGURED_MESSAGE in result.output

    def test_explain_step_out_of_range(self, runner) -> None:
        result = runner.invoke(main, ["explain", "--step", str(TRACE_LENGTH)])
        assert result.exit_code == 2

    def test_verify(self, runner) -> None:
        result = runner.invoke(main, ["verify", "--n", "20", "--seed", "7"])
        assert result.exit_code == 0
        assert "Known-answer tests: 2/2 passed" in result.output
        assert "VALIDATION PASSED: All 22 tests passed" in result.output

    def test_version(self, runner) -> None:
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output
