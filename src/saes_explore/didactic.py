"""
Didactic S-AES walkthrough.

Runs a full encryption or decryption and explains every transformation
step: the key expansion word by word, the S-box lookups, the row swap,
the GF(2^4) products of (Inv)MixColumns and the nibble-wise XOR of
AddRoundKey.

The walkthrough is driven by the same trace the rest of the package
produces, so every printed value is the value the engine computed.
"""

from __future__ import annotations

import json
from typing import Any, TextIO

from .gf import INV_MIX_MATRIX, MIX_MATRIX, gf_multiply, to_poly
from .interfaces import Mode, StepId, TraceStep
from .key_schedule import RCON1, RCON2, expand_key
from .sbox import ISBOX, SBOX, substitute_byte
from .trace import generate_trace
from .utils import (
    byte_to_bin,
    byte_to_hex,
    nibble_to_bin,
    rotate_nibbles_in_byte,
    state_to_bin,
    state_to_hex,
    to_matrix,
    to_nibbles,
)


# ──────────────────────────────────────────────────────────────────
# Formatting helpers
# ──────────────────────────────────────────────────────────────────

def _fmt_matrix_labeled(state: int, indent: str = "    ") -> str:
    """Format a 2x2 nibble state with column headers and row labels."""
    m = to_matrix(state)
    lines: list[str] = []
    lines.append(f"{indent}      c0  c1")
    for row in range(2):
        vals = "   ".join(f"{m[row][col]:X}" for col in range(2))
        lines.append(f"{indent}r{row}  [ {vals} ]")
    return "\n".join(lines)


def _fmt_table(
    rows: list[tuple[Any, ...]],
    headers: list[str],
    indent: str = "    ",
) -> str:
    """Format a list of row-tuples as an aligned table."""
    widths = [len(h) for h in headers]
    for r in rows:
        for i, v in enumerate(r):
            widths[i] = max(widths[i], len(str(v)))

    parts: list[str] = []
    parts.append(indent + "  ".join(h.ljust(widths[i]) for i, h in enumerate(headers)))
    parts.append(indent + "  ".join("-" * w for w in widths))
    for r in rows:
        parts.append(indent + "  ".join(str(v).ljust(widths[i]) for i, v in enumerate(r)))
    return "\n".join(parts)


def _position(index: int) -> str:
    """(row,col) of nibble n<index> in the column-major matrix."""
    return f"({index % 2},{index // 2})"


# ──────────────────────────────────────────────────────────────────
# Breakdowns
# ──────────────────────────────────────────────────────────────────

def key_expansion_breakdown(key: int) -> list[dict[str, int]]:
    """
    Intermediate values of both key-expansion rounds.

    Returns one dict per expansion round with keys:
        source, rotated, substituted, rcon, g, prev, left, right
    where ``left`` is the even word (w2/w4) and ``right`` the odd one (w3/w5).
    """
    schedule = expand_key(key)
    w = schedule.words
    rounds = []
    for i, rcon in ((1, RCON1), (2, RCON2)):
        source = w[2 * i - 1]
        rotated = rotate_nibbles_in_byte(source)
        substituted = substitute_byte(rotated)
        rounds.append({
            "source": source,
            "rotated": rotated,
            "substituted": substituted,
            "rcon": rcon,
            "g": substituted ^ rcon,
            "prev": w[2 * i - 2],
            "left": w[2 * i],
            "right": w[2 * i + 1],
        })
    return rounds


def mix_column_terms(state: int, inverse: bool = False) -> list[dict[str, Any]]:
    """
    Per-column GF(2^4) products behind (Inv)MixColumns.

    Returns one dict per column with the input pair, and for each output
    row the two (constant, input, product) terms and their XOR.
    """
    constants = INV_MIX_MATRIX if inverse else MIX_MATRIX
    m = to_matrix(state)
    columns = []
    for col in range(2):
        a = (m[0][col], m[1][col])
        rows = []
        for row in range(2):
            terms = [
                (constants[row][k], a[k], gf_multiply(constants[row][k], a[k]))
                for k in range(2)
            ]
            rows.append({"terms": terms, "result": terms[0][2] ^ terms[1][2]})
        columns.append({"col": col, "input": a, "rows": rows})
    return columns


# ──────────────────────────────────────────────────────────────────
# Walkthrough
# ──────────────────────────────────────────────────────────────────

def run_walkthrough(
    input_value: int,
    key: int,
    mode: Mode = Mode.ENCRYPTION,
    verbose: bool = True,
    trace_file: TextIO | None = None,
) -> dict[str, Any]:
    """
    Execute a full S-AES run with didactic output.

    Returns a dict with:
        trace       – the list of TraceSteps
        output      – final 16-bit state
        round_keys  – (K0, K1, K2)
    """
    mode = Mode(mode)
    out = _Printer(verbose)
    jl = _JsonlWriter(trace_file, mode=mode.value.lower())

    trace = generate_trace(input_value, key, mode)
    schedule = expand_key(key)
    label = "Plaintext" if mode is Mode.ENCRYPTION else "Ciphertext"

    # ── 1. State layout primer ──────────────────────────────────
    out.section("1. S-AES State Layout")
    out.p("S-AES operates on a 16-bit state split into four 4-bit nibbles,")
    out.p("arranged in a 2x2 matrix in COLUMN-MAJOR order:")
    out.p("")
    out.p("    n0 n1 n2 n3    =>   r0[ n0  n2 ]")
    out.p("                        r1[ n1  n3 ]")

    # ── 2. Inputs ───────────────────────────────────────────────
    out.section("2. Inputs")
    out.p(f"{label} (hex): {state_to_hex(input_value)}   bin: {state_to_bin(input_value)}")
    out.p(f"Key (hex):{' ' * (len(label) - 3)} {state_to_hex(key)}   bin: {state_to_bin(key)}")
    out.p("")
    out.p(f"{label} state:")
    out.p(_fmt_matrix_labeled(input_value))
    jl.emit(stage="inputs", input=state_to_hex(input_value), key=state_to_hex(key))

    # ── 3. Key expansion ────────────────────────────────────────
    out.section("3. Key Expansion")
    w = schedule.words
    out.p(f"w0 = {byte_to_hex(w[0])} ({byte_to_bin(w[0])})   "
          f"w1 = {byte_to_hex(w[1])} ({byte_to_bin(w[1])})")
    for i, r in enumerate(key_expansion_breakdown(key), start=1):
        lo, hi = 2 * i, 2 * i + 1
        out.p("")
        out.p(f"  Round {i}: g(w{hi - 2}) = SubNib(RotNib(w{hi - 2})) ^ RCON{i}")
        out.p(f"    RotNib({byte_to_hex(r['source'])}) = {byte_to_hex(r['rotated'])}")
        out.p(f"    SubNib({byte_to_hex(r['rotated'])}) = {byte_to_hex(r['substituted'])}")
        out.p(f"    {byte_to_hex(r['substituted'])} ^ RCON{i}({byte_to_hex(r['rcon'])}) = "
              f"{byte_to_hex(r['g'])}")
        out.p(f"    w{lo} = w{lo - 2} ^ g = {byte_to_hex(r['prev'])} ^ {byte_to_hex(r['g'])} = "
              f"{byte_to_hex(r['left'])}")
        out.p(f"    w{hi} = w{lo} ^ w{hi - 2} = {byte_to_hex(r['left'])} ^ "
              f"{byte_to_hex(r['source'])} = {byte_to_hex(r['right'])}")
        jl.emit(stage="key_expansion", round=i,
                **{k: byte_to_hex(v) for k, v in r.items()})
    out.p("")
    for i, k in enumerate(schedule.round_keys):
        out.p(f"  K{i} = w{2 * i} || w{2 * i + 1} = {state_to_hex(k)}")

    # ── 4. Pipeline ─────────────────────────────────────────────
    out.section(f"4. {mode.value} Pipeline")
    prev = trace[1]
    for number, step in enumerate(trace[2:-1], start=1):
        out.subsection(f"4.{number}  {step.description}")
        _explain_step(out, jl, prev, step)
        out.p("")
        out.p(f"After {step.description}:")
        out.p(_fmt_matrix_labeled(step.state.raw))
        prev = step

    # ── 5. Summary ──────────────────────────────────────────────
    result = trace[-1].state.raw
    out.section("5. Summary")
    out.p(f"{label}: {state_to_hex(input_value)}")
    out.p(f"Key:  {state_to_hex(key)}")
    out.p("Round keys: " + " ".join(state_to_hex(k) for k in schedule.round_keys))
    out.p(f"{trace[-1].description}: {state_to_hex(result)}")
    jl.emit(stage="output", output=state_to_hex(result))

    return {
        "trace": trace,
        "output": result,
        "round_keys": schedule.round_keys,
    }


def _explain_step(out: _Printer, jl: _JsonlWriter, prev: TraceStep, step: TraceStep) -> None:
    """Print the detailed breakdown of a single pipeline step."""
    before = prev.state.raw
    after = step.state.raw
    name = step.id.value

    if step.key is not None:
        out.p("state XOR RoundKey (nibble by nibble):")
        rows = []
        for i, (sv, kv, rv) in enumerate(zip(to_nibbles(before), to_nibbles(step.key),
                                             to_nibbles(after))):
            rows.append((f"n{i}", _position(i), f"{sv:X}", f"{kv:X}", f"{rv:X}",
                         f"{nibble_to_bin(sv)} ^ {nibble_to_bin(kv)} = {nibble_to_bin(rv)}"))
        out.p(_fmt_table(rows, ["idx", "(r,c)", "state", "key", "out", "equation"]))
        jl.emit(stage=name, state=state_to_hex(before), key=state_to_hex(step.key),
                out=state_to_hex(after))

    elif step.id in (StepId.ROUND_1_SUB_NIBBLES, StepId.ROUND_2_SUB_NIBBLES,
                     StepId.DEC_ROUND_1_INV_SUB_NIBBLES, StepId.DEC_ROUND_2_INV_SUB_NIBBLES):
        inverse = step.id in (StepId.DEC_ROUND_1_INV_SUB_NIBBLES,
                              StepId.DEC_ROUND_2_INV_SUB_NIBBLES)
        table = ISBOX if inverse else SBOX
        lookup = "IS[in]" if inverse else "S[in]"
        out.p(f"Each nibble is replaced by its {'inverse ' if inverse else ''}S-box lookup: "
              f"out = {lookup}")
        out.p("")
        rows = []
        for i, iv in enumerate(to_nibbles(before)):
            ov = table[iv]
            rows.append((f"n{i}", _position(i), f"{iv:X}", nibble_to_bin(iv),
                         f"{ov:X}", nibble_to_bin(ov)))
        out.p(_fmt_table(rows, ["idx", "(r,c)", "in", "bin", lookup, "bin"]))
        jl.emit(stage=name, **{"in": state_to_hex(before), "out": state_to_hex(after)})

    elif step.id in (StepId.ROUND_1_SHIFT_ROW, StepId.ROUND_2_SHIFT_ROW,
                     StepId.DEC_ROUND_1_SHIFT_ROW, StepId.DEC_ROUND_2_SHIFT_ROW):
        m_in = to_matrix(before)
        m_out = to_matrix(after)
        out.p("Row 0 is unchanged; the two nibbles of row 1 swap places.")
        if step.id in (StepId.DEC_ROUND_1_SHIFT_ROW, StepId.DEC_ROUND_2_SHIFT_ROW):
            out.p("(A swap of two nibbles is its own inverse.)")
        out.p(f"  Row 0: [{m_in[0][0]:X} {m_in[0][1]:X}] -> [{m_out[0][0]:X} {m_out[0][1]:X}]")
        out.p(f"  Row 1: [{m_in[1][0]:X} {m_in[1][1]:X}] -> [{m_out[1][0]:X} {m_out[1][1]:X}]")
        jl.emit(stage=name, **{"in": state_to_hex(before), "out": state_to_hex(after)})

    elif step.id in (StepId.ROUND_1_MIX_COLUMNS, StepId.DEC_ROUND_1_INV_MIX_COLUMNS):
        inverse = step.id is StepId.DEC_ROUND_1_INV_MIX_COLUMNS
        c = INV_MIX_MATRIX if inverse else MIX_MATRIX
        out.p("Each column is multiplied by the constant matrix in GF(2^4)")
        out.p("(polynomial x^4 + x + 1):")
        out.p(f"    [{c[0][0]} {c[0][1]}]   [a0]   [r0]")
        out.p(f"    [{c[1][0]} {c[1][1]}] x [a1] = [r1]")
        for column in mix_column_terms(before, inverse):
            a0, a1 = column["input"]
            out.p("")
            out.p(f"  --- Column {column['col']} ---")
            out.p(f"  Input:  a0={a0:X} ({to_poly(a0)})  a1={a1:X} ({to_poly(a1)})")
            for ri, row in enumerate(column["rows"]):
                (c0, v0, p0), (c1, v1, p1) = row["terms"]
                out.p(f"  r{ri} = {c0}*{v0:X} ^ {c1}*{v1:X} = {p0:X} ^ {p1:X} = {row['result']:X}")
            jl.emit(stage=name, col=column["col"],
                    a=[f"{v:X}" for v in column["input"]],
                    result=[f"{row['result']:X}" for row in column["rows"]])

    else:
        raise ValueError(f"No walkthrough for step {name}")


class _Printer:
    """Conditional stdout printer (only when verbose)."""
    def __init__(self, enabled: bool):
        self._on = enabled

    def p(self, text: str = "") -> None:
        if self._on:
            print(text)

    def section(self, title: str) -> None:
        if self._on:
            print(f"\n{'='*70}")
            print(f"  {title}")
            print(f"{'='*70}")

    def subsection(self, title: str) -> None:
        if self._on:
            print(f"\n  --- {title} {'─'*max(0, 55-len(title))}")


class _JsonlWriter:
    """Emit deterministic JSONL events."""

    def __init__(self, fh: TextIO | None, mode: str = "encryption"):
        self._fh = fh
        self._base: dict[str, Any] = {"mode": mode}
        self._seq = 0

    def emit(self, **kw: Any) -> None:
        if self._fh is None:
            return
        record = dict(self._base)
        record["seq"] = self._seq
        self._seq += 1
        record.update(kw)
        self._fh.write(json.dumps(record, default=str) + "\n")
        self._fh.flush()
