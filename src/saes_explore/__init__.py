"""
S-AES Exploration

Simplified AES (16-bit block, 16-bit key, two rounds) with a step tracer:
every intermediate state of an encryption or decryption is recorded for
display and explanation.
"""

__version__ = "1.0.0"

# Default values from the Stallings S-AES worked example
DEFAULT_KEY_HEX = "4AF5"
DEFAULT_INPUT_HEX = "D728"
DEFAULT_CT_HEX = "24EC"

from .gf import gf_multiply
from .interfaces import Mode, StateView, StepId, TraceStep
from .key_schedule import KeySchedule, expand_key
from .saes_core import (
    add_round_key,
    decrypt,
    encrypt,
    inv_mix_columns,
    mix_columns,
    shift_row,
    substitute_nibbles,
)
from .sbox import ISBOX, SBOX
from .trace import generate_trace
from .utils import from_matrix, from_nibbles, to_matrix, to_nibbles

__all__ = [
    "gf_multiply",
    "SBOX",
    "ISBOX",
    "to_nibbles",
    "from_nibbles",
    "to_matrix",
    "from_matrix",
    "KeySchedule",
    "expand_key",
    "add_round_key",
    "substitute_nibbles",
    "shift_row",
    "mix_columns",
    "inv_mix_columns",
    "encrypt",
    "decrypt",
    "Mode",
    "StepId",
    "StateView",
    "TraceStep",
    "generate_trace",
]
