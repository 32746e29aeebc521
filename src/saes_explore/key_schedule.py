"""
S-AES key expansion.

The 16-bit key is split into two bytes w0, w1 and expanded into six words:

  w2 = w0 ^ RCON1 ^ SubNib(RotNib(w1))
  w3 = w2 ^ w1
  w4 = w2 ^ RCON2 ^ SubNib(RotNib(w3))
  w5 = w4 ^ w3

Round key K_i is the concatenation w[2i] || w[2i+1].
"""

from dataclasses import dataclass

from .sbox import substitute_byte
from .utils import BYTE_MASK, check_state, rotate_nibbles_in_byte

RCON1 = 0x80
RCON2 = 0x30


@dataclass(frozen=True)
class KeySchedule:
    """Result of one key expansion: three round keys and the six words."""

    round_keys: tuple[int, int, int]
    words: tuple[int, int, int, int, int, int]

    def round_key(self, index: int) -> int:
        """Return K<index> for index 0, 1 or 2."""
        if index not in (0, 1, 2):
            raise ValueError(f"round key index must be 0, 1 or 2, got {index!r}")
        return self.round_keys[index]


def g_function(word: int, rcon: int) -> int:
    """SubNib(RotNib(word)) XOR rcon."""
    return substitute_byte(rotate_nibbles_in_byte(word)) ^ rcon


def expand_key(key: int) -> KeySchedule:
    """
    Expand a 16-bit key into the S-AES round keys.

    Args:
        key: 16-bit key

    Returns:
        KeySchedule with round_keys (K0, K1, K2) and words (w0..w5)
    """
    check_state(key, "key")

    w0 = (key >> 8) & BYTE_MASK
    w1 = key & BYTE_MASK

    w2 = w0 ^ g_function(w1, RCON1)
    w3 = w2 ^ w1

    w4 = w2 ^ g_function(w3, RCON2)
    w5 = w4 ^ w3

    return KeySchedule(
        round_keys=((w0 << 8) | w1, (w2 << 8) | w3, (w4 << 8) | w5),
        words=(w0, w1, w2, w3, w4, w5),
    )
