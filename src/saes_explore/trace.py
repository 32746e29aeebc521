"""
Trace generation and recording for S-AES runs.

Contains:
- generate_trace: the 11-step record of one encryption or decryption
- TraceRecorder: JSON Lines trace output
"""

import json
from typing import Any, TextIO

from .interfaces import Mode, StateView, StepId, TraceStep
from .key_schedule import expand_key
from .saes_core import DECRYPT_SCHEDULE, ENCRYPT_SCHEDULE, run_schedule
from .utils import check_state, state_to_hex


# One entry per schedule operation: (step id, description, details)
_ENCRYPT_STEPS = (
    (StepId.INITIAL_ADD_ROUND_KEY, "Add Round Key 0",
     "Bitwise XOR the state with Round Key 0 (K0)."),
    (StepId.ROUND_1_SUB_NIBBLES, "SubNibbles (Round 1)",
     "Substitute each nibble using the S-Box."),
    (StepId.ROUND_1_SHIFT_ROW, "ShiftRow (Round 1)",
     "Swap the nibbles in the second row."),
    (StepId.ROUND_1_MIX_COLUMNS, "MixColumns (Round 1)",
     "Multiply columns by the constant matrix over GF(2^4)."),
    (StepId.ROUND_1_ADD_ROUND_KEY, "Add Round Key 1",
     "Bitwise XOR the state with Round Key 1 (K1)."),
    (StepId.ROUND_2_SUB_NIBBLES, "SubNibbles (Round 2)",
     "Substitute each nibble using the S-Box again."),
    (StepId.ROUND_2_SHIFT_ROW, "ShiftRow (Round 2)",
     "Swap the nibbles in the second row."),
    (StepId.ROUND_2_ADD_ROUND_KEY, "Add Round Key 2",
     "Bitwise XOR the state with Round Key 2 (K2)."),
)

_DECRYPT_STEPS = (
    (StepId.DEC_INITIAL_ADD_ROUND_KEY, "Add Round Key 2",
     "Bitwise XOR the state with Round Key 2 (K2)."),
    (StepId.DEC_ROUND_1_SHIFT_ROW, "ShiftRow (Inverse)",
     "Swap the nibbles in the second row (Self-inverse)."),
    (StepId.DEC_ROUND_1_INV_SUB_NIBBLES, "InvSubNibbles (Round 1)",
     "Substitute each nibble using the Inverse S-Box."),
    (StepId.DEC_ROUND_1_ADD_ROUND_KEY, "Add Round Key 1",
     "Bitwise XOR the state with Round Key 1 (K1)."),
    (StepId.DEC_ROUND_1_INV_MIX_COLUMNS, "InvMixColumns",
     "Multiply columns by the inverse constant matrix over GF(2^4)."),
    (StepId.DEC_ROUND_2_SHIFT_ROW, "ShiftRow (Inverse)",
     "Swap the nibbles in the second row."),
    (StepId.DEC_ROUND_2_INV_SUB_NIBBLES, "InvSubNibbles (Round 2)",
     "Substitute each nibble using the Inverse S-Box."),
    (StepId.DEC_ROUND_2_ADD_ROUND_KEY, "Add Round Key 0",
     "Bitwise XOR the state with Round Key 0 (K0)."),
)

TRACE_LENGTH = 2 + len(ENCRYPT_SCHEDULE) + 1


def generate_trace(input_value: int, key: int, mode: Mode = Mode.ENCRYPTION) -> list[TraceStep]:
    """
    Run S-AES end to end and record every intermediate state.

    Args:
        input_value: 16-bit plaintext (encryption) or ciphertext (decryption)
        key: 16-bit key
        mode: Mode.ENCRYPTION or Mode.DECRYPTION

    Returns:
        List of exactly TRACE_LENGTH (11) TraceSteps: Input, Key Expansion, one step per
        pipeline operation, Output.
    """
    check_state(input_value, "input_value")
    mode = Mode(mode)
    key_schedule = expand_key(key)
    k0, k1, k2 = key_schedule.round_keys

    encrypting = mode is Mode.ENCRYPTION
    schedule = ENCRYPT_SCHEDULE if encrypting else DECRYPT_SCHEDULE
    step_info = _ENCRYPT_STEPS if encrypting else _DECRYPT_STEPS

    steps = [
        TraceStep(
            id=StepId.INPUT,
            description="Input (Plaintext)" if encrypting else "Input (Ciphertext)",
            state=StateView.of(input_value),
            details="The 16-bit input is arranged into a 2x2 matrix of 4-bit nibbles.",
        ),
        TraceStep(
            id=StepId.KEY_EXPANSION,
            description="Key Expansion",
            state=StateView.of(input_value),
            details=(
                "Key expansion generates three 16-bit round keys from the original key.\n"
                f"K0: {state_to_hex(k0)}\nK1: {state_to_hex(k1)}\nK2: {state_to_hex(k2)}"
            ),
            expanded_words=key_schedule.words,
        ),
    ]

    state = input_value
    for (step_id, description, details), (_, round_key, state) in zip(
        step_info, run_schedule(input_value, key_schedule, schedule)
    ):
        steps.append(TraceStep(
            id=step_id,
            description=description,
            state=StateView.of(state),
            details=details,
            key=round_key,
        ))

    steps.append(TraceStep(
        id=StepId.OUTPUT,
        description="Ciphertext Output" if encrypting else "Plaintext Output",
        state=StateView.of(state),
        details=(
            "The final state is the encrypted ciphertext." if encrypting
            else "The final state is the decrypted plaintext."
        ),
    ))
    return steps


# ------------------------------------------------------------------
# TraceRecorder  –  JSON Lines
# ------------------------------------------------------------------

class TraceRecorder:
    """Writes trace steps to a JSON Lines stream, one record per line."""

    def __init__(self, trace_file: TextIO):
        self.trace_file = trace_file

    def record_trace(self, steps: list[TraceStep], **extra: Any) -> None:
        """Record every step of a trace, tagging each with its index."""
        for index, step in enumerate(steps):
            self.record(index=index, **extra, **step.to_dict())

    def record(self, **kwargs) -> None:
        """Record a trace entry."""
        self._write_jsonl(kwargs)

    def _write_jsonl(self, record: dict[str, Any]) -> None:
        self.trace_file.write(json.dumps(record) + "\n")
        self.trace_file.flush()
