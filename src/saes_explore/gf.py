"""
GF(2^4) arithmetic for S-AES MixColumns.

Field: GF(2)[x] / (x^4 + x + 1), elements are nibbles with bit i being the
coefficient of x^i.
"""

from .utils import check_nibble

# x^4 + x + 1: a shifted-out x^4 reduces to x + 1
REDUCTION = 0x3

# MixColumns constant matrices
MIX_MATRIX = ((1, 4), (4, 1))
INV_MIX_MATRIX = ((9, 2), (2, 9))


def gf_multiply(a: int, b: int) -> int:
    """Multiply two nibbles in GF(2^4) with polynomial x^4 + x + 1."""
    check_nibble(a, "a")
    check_nibble(b, "b")

    product = 0
    for _ in range(4):
        if b & 1:
            product ^= a
        carry = a & 0x8
        a = (a << 1) & 0xF
        if carry:
            a ^= REDUCTION
        b >>= 1
    return product


def to_poly(n: int) -> str:
    """
    Render a nibble as a polynomial string, e.g. 0xB -> "x^3 + x + 1".
    """
    check_nibble(n, "n")
    if n == 0:
        return "0"
    parts = []
    if (n >> 3) & 1:
        parts.append("x^3")
    if (n >> 2) & 1:
        parts.append("x^2")
    if (n >> 1) & 1:
        parts.append("x")
    if n & 1:
        parts.append("1")
    return " + ".join(parts)
