"""
S-AES nibble substitution tables.
"""

from .utils import NIBBLE_MASK, check_byte, check_nibble

SBOX = (
    0x9, 0x4, 0xA, 0xB, 0xD, 0x1, 0x8, 0x5,
    0x6, 0x2, 0x0, 0x3, 0xC, 0xE, 0xF, 0x7,
)

ISBOX = (
    0xA, 0x5, 0x9, 0xB, 0x1, 0x7, 0x8, 0xF,
    0x6, 0x0, 0x2, 0x3, 0xC, 0x4, 0xD, 0xE,
)


def substitute_nibble(n: int, inverse: bool = False) -> int:
    """Look up a nibble in the forward or inverse S-box."""
    check_nibble(n, "n")
    return ISBOX[n] if inverse else SBOX[n]


def substitute_byte(byte_val: int, inverse: bool = False) -> int:
    """
    Apply the S-box to the high and low nibble of a byte independently.

    Used by the key schedule (SubNib).
    """
    check_byte(byte_val, "byte_val")
    table = ISBOX if inverse else SBOX
    return (table[(byte_val >> 4) & NIBBLE_MASK] << 4) | table[byte_val & NIBBLE_MASK]
