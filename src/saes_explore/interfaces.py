"""Core data structures for S-AES traces."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .utils import byte_to_hex, state_to_hex, to_matrix


class Mode(str, Enum):
    """Direction of a cipher run."""

    ENCRYPTION = "Encryption"
    DECRYPTION = "Decryption"

    @classmethod
    def parse(cls, text: str) -> Mode:
        """Parse a mode name case-insensitively ("encryption", "dec", ...)."""
        lowered = text.strip().lower()
        for mode in cls:
            if mode.value.lower().startswith(lowered) and lowered:
                return mode
        raise ValueError(f"Unknown mode '{text}'. Available: encryption, decryption")


class StepId(str, Enum):
    """Every stage a trace step can record."""

    # Common
    INPUT = "Input"
    KEY_EXPANSION = "Key Expansion"
    OUTPUT = "Output"

    # Encryption
    INITIAL_ADD_ROUND_KEY = "Add Round Key 0"
    ROUND_1_SUB_NIBBLES = "Round 1: Sub Nibbles"
    ROUND_1_SHIFT_ROW = "Round 1: Shift Row"
    ROUND_1_MIX_COLUMNS = "Round 1: Mix Columns"
    ROUND_1_ADD_ROUND_KEY = "Round 1: Add Round Key 1"
    ROUND_2_SUB_NIBBLES = "Round 2: Sub Nibbles"
    ROUND_2_SHIFT_ROW = "Round 2: Shift Row"
    ROUND_2_ADD_ROUND_KEY = "Round 2: Add Round Key 2"

    # Decryption
    DEC_INITIAL_ADD_ROUND_KEY = "Add Round Key 2"
    DEC_ROUND_1_SHIFT_ROW = "Round 1: Shift Row (Inv)"
    DEC_ROUND_1_INV_SUB_NIBBLES = "Round 1: Inv Sub Nibbles"
    DEC_ROUND_1_ADD_ROUND_KEY = "Round 1: Add Round Key 1 (Dec)"
    DEC_ROUND_1_INV_MIX_COLUMNS = "Round 1: Inv Mix Columns"
    DEC_ROUND_2_SHIFT_ROW = "Round 2: Shift Row (Inv)"
    DEC_ROUND_2_INV_SUB_NIBBLES = "Round 2: Inv Sub Nibbles"
    DEC_ROUND_2_ADD_ROUND_KEY = "Round 2: Add Round Key 0"

    @property
    def is_add_round_key(self) -> bool:
        return "Add Round Key" in self.value


@dataclass(frozen=True)
class StateView:
    """A state as both its raw 16-bit value and its 2x2 nibble matrix."""

    raw: int
    matrix: tuple[tuple[int, int], tuple[int, int]]

    @classmethod
    def of(cls, raw: int) -> StateView:
        m = to_matrix(raw)
        return cls(raw=raw, matrix=(tuple(m[0]), tuple(m[1])))

    @property
    def hex(self) -> str:
        return state_to_hex(self.raw)


@dataclass(frozen=True)
class TraceStep:
    """One recorded point of an S-AES run."""

    id: StepId
    description: str
    state: StateView
    details: str = ""
    # Round key XORed in at this step (AddRoundKey steps only)
    key: int | None = None
    # w0..w5 (key expansion step only)
    expanded_words: tuple[int, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary (values as hex strings)."""
        return {
            "id": self.id.value,
            "description": self.description,
            "state_hex": self.state.hex,
            "matrix": [list(row) for row in self.state.matrix],
            "details": self.details,
            "key_hex": state_to_hex(self.key) if self.key is not None else None,
            "expanded_words": (
                [byte_to_hex(w) for w in self.expanded_words]
                if self.expanded_words is not None else None
            ),
        }
