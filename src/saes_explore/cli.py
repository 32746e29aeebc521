"""Command-line interface for S-AES exploration.

Usage:
    saes-explore encrypt --input D728 --key 4AF5 --verbose
    saes-explore decrypt --input 24EC --key 4AF5
    saes-explore keys --key 4AF5
    saes-explore trace --mode decryption --format json --output trace.json
    saes-explore walkthrough --input D728 --key 4AF5 --trace run.jsonl
    saes-explore explain --step 5
    saes-explore verify --n 1000 --seed 42
"""

from __future__ import annotations

import logging
import random
import secrets
import sys
from typing import Any

import click
from pydantic import ValidationError

from . import DEFAULT_CT_HEX, DEFAULT_INPUT_HEX, DEFAULT_KEY_HEX, __version__
from .config import load_settings
from .didactic import run_walkthrough
from .explain import NOT_CONFIGURED_MESSAGE, explain_step
from .golden import KNOWN_ANSWER_VECTORS, validate_round_trip, validate_vector
from .interfaces import Mode
from .key_schedule import expand_key
from .reporting import (
    export_to_csv,
    export_to_json,
    export_to_markdown,
    format_json,
    format_markdown,
    format_trace_table,
)
from .saes_core import decrypt, encrypt
from .trace import TRACE_LENGTH, TraceRecorder, generate_trace
from .utils import byte_to_hex, parse_hex_word, state_to_bin, state_to_hex

logger = logging.getLogger(__name__)


class HexWord(click.ParamType):
    """Up to 4 hex characters; empty or invalid text parses to 0."""

    name = "hex"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> int:
        if isinstance(value, int):
            return value
        return parse_hex_word(value)


HEX_WORD = HexWord()
MODE_CHOICE = click.Choice([m.value.lower() for m in Mode], case_sensitive=False)


def _input_option(default: str = DEFAULT_INPUT_HEX):
    return click.option(
        "--input", "input_value",
        type=HEX_WORD,
        default=default,
        show_default=True,
        help="16-bit input block as up to 4 hex chars",
    )


def _key_option():
    return click.option(
        "--key",
        type=HEX_WORD,
        default=DEFAULT_KEY_HEX,
        show_default=True,
        help="16-bit key as up to 4 hex chars",
    )


def _mode_option():
    return click.option(
        "--mode",
        type=MODE_CHOICE,
        default="encryption",
        show_default=True,
        help="Run direction",
    )


@click.group()
@click.version_option(version=__version__, prog_name="saes-explore")
@click.option("--log-level", default="WARNING", show_default=True,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              help="Logging level for diagnostic messages")
def main(log_level: str) -> None:
    """Simplified AES (S-AES) explorer.

    Encrypt and decrypt 16-bit blocks, inspect the key schedule and trace
    every intermediate state of the two-round cipher.
    """
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")


def _run_block(mode: Mode, input_value: int, key: int, verbose: bool, trace_path: str | None) -> None:
    label_in, label_out = (("Plaintext", "Ciphertext") if mode is Mode.ENCRYPTION
                           else ("Ciphertext", "Plaintext"))
    result = encrypt(input_value, key) if mode is Mode.ENCRYPTION else decrypt(input_value, key)

    click.echo(f"{label_in}: {state_to_hex(input_value)}")
    click.echo(f"Key:        {state_to_hex(key)}")
    click.echo(f"{label_out}: {state_to_hex(result)}")

    if verbose or trace_path:
        steps = generate_trace(input_value, key, mode)
        if verbose:
            click.echo("")
            click.echo(format_trace_table(steps))
        if trace_path:
            with open(trace_path, "w") as fh:
                TraceRecorder(trace_file=fh).record_trace(steps, mode=mode.value)
            click.echo(f"\nTrace written to {trace_path}")


@main.command(name="encrypt")
@_input_option()
@_key_option()
@click.option("--verbose", "-v", is_flag=True, help="Show every intermediate state")
@click.option("--trace", "trace_path", type=click.Path(dir_okay=False),
              help="Write the trace as JSON Lines to FILE")
def encrypt_cmd(input_value: int, key: int, verbose: bool, trace_path: str | None) -> None:
    """Encrypt one 16-bit block."""
    _run_block(Mode.ENCRYPTION, input_value, key, verbose, trace_path)


@main.command(name="decrypt")
@_input_option(default=DEFAULT_CT_HEX)
@_key_option()
@click.option("--verbose", "-v", is_flag=True, help="Show every intermediate state")
@click.option("--trace", "trace_path", type=click.Path(dir_okay=False),
              help="Write the trace as JSON Lines to FILE")
def decrypt_cmd(input_value: int, key: int, verbose: bool, trace_path: str | None) -> None:
    """Decrypt one 16-bit block."""
    _run_block(Mode.DECRYPTION, input_value, key, verbose, trace_path)


@main.command()
@_key_option()
def keys(key: int) -> None:
    """Show the key schedule words and round keys."""
    schedule = expand_key(key)
    click.echo(f"Key: {state_to_hex(key)} ({state_to_bin(key)})")
    click.echo("")
    for i, w in enumerate(schedule.words):
        click.echo(f"  w{i} = {byte_to_hex(w)}  ({w:08b})")
    click.echo("")
    for i, k in enumerate(schedule.round_keys):
        click.echo(f"  K{i} = {state_to_hex(k)}")


@main.command()
@_input_option()
@_key_option()
@_mode_option()
@click.option(
    "--format", "output_format",
    type=click.Choice(["table", "json", "markdown", "csv"]),
    default="table",
    show_default=True,
    help="Output format",
)
@click.option("--output", "output_path", type=click.Path(dir_okay=False),
              help="Write to FILE instead of stdout (json, markdown, csv)")
def trace(input_value: int, key: int, mode: str, output_format: str, output_path: str | None) -> None:
    """Print or export the full step trace."""
    steps = generate_trace(input_value, key, Mode.parse(mode))

    if output_format == "table":
        click.echo(format_trace_table(steps))
        return

    if output_format == "csv" and output_path is None:
        raise click.UsageError("--format csv requires --output")

    if output_path is None:
        if output_format == "json":
            click.echo(format_json(steps))
        else:
            click.echo(format_markdown(steps))
        return

    exporters = {
        "json": export_to_json,
        "markdown": export_to_markdown,
        "csv": export_to_csv,
    }
    written = exporters[output_format](steps, output_path)
    click.echo(f"Trace written to {written}")


@main.command()
@_input_option()
@_key_option()
@_mode_option()
@click.option("--trace", "trace_path", type=click.Path(dir_okay=False),
              help="Write didactic JSON Lines events to FILE")
def walkthrough(input_value: int, key: int, mode: str, trace_path: str | None) -> None:
    """Step-by-step didactic walkthrough of a full run."""
    trace_file = None
    if trace_path:
        try:
            trace_file = open(trace_path, "w")
        except OSError as e:
            raise click.FileError(trace_path, hint=str(e)) from e

    try:
        run_walkthrough(input_value, key, Mode.parse(mode), verbose=True, trace_file=trace_file)
    finally:
        if trace_file:
            trace_file.close()


@main.command()
@_input_option()
@_key_option()
@_mode_option()
@click.option("--step", "step_index", type=click.IntRange(0, TRACE_LENGTH - 1),
              required=True, help="Index of the trace step to explain")
def explain(input_value: int, key: int, mode: str, step_index: int) -> None:
    """Ask the explanation service about one trace step."""
    steps = generate_trace(input_value, key, Mode.parse(mode))
    step = steps[step_index]
    prev_step = steps[step_index - 1] if step_index > 0 else None

    click.echo(f"Step {step_index}: {step.id.value}")
    click.echo(f"State: {step.state.hex}")
    click.echo("")

    try:
        settings = load_settings()
    except (ValueError, ValidationError) as e:
        logger.warning("Explanation settings are invalid: %s", e)
        click.echo(NOT_CONFIGURED_MESSAGE)
        return

    click.echo(explain_step(step, prev_step, settings=settings))


@main.command()
@click.option(
    "--n",
    "num_tests",
    type=int,
    default=100,
    help="Number of random round-trip tests (default: 100)",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Random seed for reproducibility",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show detailed output",
)
def verify(num_tests: int, seed: int | None, verbose: bool) -> None:
    """Check known-answer vectors and random encrypt/decrypt round trips."""
    click.echo("Running known-answer tests...")
    kat_passed = 0
    for i, vec in enumerate(KNOWN_ANSWER_VECTORS):
        ok, detail = validate_vector(vec)
        if ok:
            kat_passed += 1
            if verbose:
                click.echo(f"  KAT {i+1}: PASS")
        else:
            click.echo(f"  KAT {i+1}: FAIL - {detail}")
    click.echo(f"Known-answer tests: {kat_passed}/{len(KNOWN_ANSWER_VECTORS)} passed")

    click.echo(f"\nRunning {num_tests} random round-trip tests...")
    if seed is not None:
        rng = random.Random(seed)
        random_word = lambda: rng.randrange(0x10000)
    else:
        random_word = lambda: secrets.randbelow(0x10000)

    rt_passed = 0
    for i in range(num_tests):
        ok, detail = validate_round_trip(random_word(), random_word())
        if ok:
            rt_passed += 1
        elif verbose:
            click.echo(f"  Round trip {i+1}: FAIL - {detail}")
    click.echo(f"Round-trip tests: {rt_passed}/{num_tests} passed")

    total_tests = len(KNOWN_ANSWER_VECTORS) + num_tests
    total_passed = kat_passed + rt_passed
    click.echo("")
    if total_passed == total_tests:
        click.echo(f"VALIDATION PASSED: All {total_tests} tests passed")
        sys.exit(0)
    else:
        click.echo(f"VALIDATION FAILED: {total_tests - total_passed} failures")
        sys.exit(1)


if __name__ == "__main__":
    main()
