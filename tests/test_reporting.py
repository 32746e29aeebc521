"""Tests for trace report exporters."""

import csv
import json

from saes_explore.interfaces import Mode
from saes_explore.reporting import (
    export_to_csv,
    export_to_json,
    export_to_markdown,
    format_json,
    format_markdown,
    format_trace_table,
)
from saes_explore.trace import TRACE_LENGTH, generate_trace


TRACE = generate_trace(0xD728, 0x4AF5, Mode.ENCRYPTION)


class TestExports:
    """File exporters."""

    def test_json(self, tmp_path) -> None:
        path = export_to_json(TRACE, tmp_path / "out" / "trace.json")
        data = json.loads(path.read_text())
        assert len(data) == TRACE_LENGTH
        assert data[0]["index"] == 0
        assert data[-1]["state_hex"] == "24EC"
        assert data[4]["key_hex"] is None

    def test_json_text_matches_file(self, tmp_path) -> None:
        path = export_to_json(TRACE, tmp_path / "trace.json")
        assert path.read_text() == format_json(TRACE)

    def test_csv(self, tmp_path) -> None:
        path = export_to_csv(TRACE, tmp_path / "trace.csv")
        with open(path, newline="") as f:
            rows = list(csv.DictReader(f))
        assert len(rows) == TRACE_LENGTH
        assert rows[2]["id"] == "Add Round Key 0"
        assert rows[2]["key_hex"] == "4AF5"
        assert "\n" not in rows[1]["details"]

    def test_markdown(self, tmp_path) -> None:
        path = export_to_markdown(TRACE, tmp_path / "trace.md", title="Demo")
        text = path.read_text()
        assert text.startswith("# Demo")
        assert "## 10. Ciphertext Output" in text
        assert "Words: w0=4A w1=F5 w2=DD w3=28 w4=87 w5=AF" in text


class TestFormatting:
    """In-memory formatting."""

    def test_table(self) -> None:
        table = format_trace_table(TRACE)
        assert "Round 1: Mix Columns" in table
        assert "F633" in table
        assert "9 D / D D" in table

    def test_compact_table(self) -> None:
        table = format_trace_table(TRACE, compact=True)
        assert "Description" not in table
        assert "87AF" in table

    def test_empty_table(self) -> None:
        assert format_trace_table([]) == "No steps."

    def test_markdown_table_header(self) -> None:
        text = format_markdown(TRACE)
        assert "| Step" in text
        assert "Round Key" in text
