"""
Utility functions for nibble/state conversions and hex formatting.

S-AES state is a 16-bit value viewed as four nibbles n0..n3
(n0 = bits 15-12, n3 = bits 3-0) arranged column-major in a 2x2 matrix:

        col 0  col 1
  r0  [  n0     n2  ]
  r1  [  n1     n3  ]

All conversions here are bijections; every primitive validates its
arguments and raises ValueError for values outside their bit-width.
"""

import string

NIBBLE_MASK = 0xF
BYTE_MASK = 0xFF

_KINDS = {
    4: "a 4-bit value (0..0xF)",
    8: "an 8-bit value (0..0xFF)",
    16: "a 16-bit value (0..0xFFFF)",
}


def check_width(value: int, bits: int, name: str) -> int:
    """
    Validate that ``value`` is an int that fits in ``bits`` bits.

    Returns the value unchanged so it can be used inline.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be {_KINDS[bits]}, got {value!r}")
    if not 0 <= value < (1 << bits):
        raise ValueError(f"{name} must be {_KINDS[bits]}, got {value:#x}")
    return value


def check_nibble(value: int, name: str = "nibble") -> int:
    return check_width(value, 4, name)


def check_byte(value: int, name: str = "byte") -> int:
    return check_width(value, 8, name)


def check_state(value: int, name: str = "state") -> int:
    return check_width(value, 16, name)


def to_nibbles(state: int) -> list[int]:
    """
    Split a 16-bit state into [n0, n1, n2, n3] (most significant first).
    """
    check_state(state)
    return [
        (state >> 12) & NIBBLE_MASK,
        (state >> 8) & NIBBLE_MASK,
        (state >> 4) & NIBBLE_MASK,
        state & NIBBLE_MASK,
    ]


def from_nibbles(nibbles: list[int]) -> int:
    """
    Join four nibbles [n0, n1, n2, n3] back into a 16-bit state.
    """
    if len(nibbles) != 4:
        raise ValueError(f"Expected 4 nibbles, got {len(nibbles)}")
    for i, n in enumerate(nibbles):
        check_nibble(n, f"nibble[{i}]")
    return (nibbles[0] << 12) | (nibbles[1] << 8) | (nibbles[2] << 4) | nibbles[3]


def to_matrix(state: int) -> list[list[int]]:
    """
    Convert a 16-bit state to its 2x2 column-major nibble matrix.

    Returns:
        [[n0, n2], [n1, n3]]
    """
    n = to_nibbles(state)
    return [
        [n[0], n[2]],
        [n[1], n[3]],
    ]


def from_matrix(matrix: list[list[int]]) -> int:
    """
    Convert a 2x2 column-major nibble matrix back to a 16-bit state.
    """
    if len(matrix) != 2 or any(len(row) != 2 for row in matrix):
        raise ValueError("Expected a 2x2 nibble matrix")
    return from_nibbles([matrix[0][0], matrix[1][0], matrix[0][1], matrix[1][1]])


def rotate_nibbles_in_byte(byte_val: int) -> int:
    """
    Swap the high and low nibble of a byte (RotNib). Self-inverse.
    """
    check_byte(byte_val, "byte_val")
    return ((byte_val & NIBBLE_MASK) << 4) | ((byte_val >> 4) & NIBBLE_MASK)


def parse_hex_word(text: str | None) -> int:
    """
    Parse user-supplied hex text into a 16-bit value.

    Only the first 4 characters are considered. Empty input, or any
    character that is not a hex digit (sign, prefix, separator), parses to 0.
    """
    if not text:
        return 0
    digits = text.strip()[:4]
    if not digits or any(c not in string.hexdigits for c in digits):
        return 0
    return int(digits, 16)


def state_to_hex(state: int) -> str:
    """
    Format a 16-bit state as 4 uppercase hex digits.
    """
    return f"{check_state(state):04X}"


def byte_to_hex(byte_val: int) -> str:
    return f"{check_byte(byte_val):02X}"


def nibble_to_bin(nibble: int) -> str:
    return f"{check_nibble(nibble):04b}"


def byte_to_bin(byte_val: int) -> str:
    return f"{check_byte(byte_val):08b}"


def state_to_bin(state: int) -> str:
    """
    Format a state as four space-separated binary nibbles.
    """
    return " ".join(nibble_to_bin(n) for n in to_nibbles(state))
