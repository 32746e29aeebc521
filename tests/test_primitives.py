"""Tests for GF(2^4) arithmetic, the S-boxes and the nibble/matrix codec."""

import pytest

from saes_explore.gf import INV_MIX_MATRIX, MIX_MATRIX, gf_multiply, to_poly
from saes_explore.sbox import ISBOX, SBOX, substitute_byte, substitute_nibble
from saes_explore.utils import (
    check_state,
    from_matrix,
    from_nibbles,
    parse_hex_word,
    rotate_nibbles_in_byte,
    state_to_bin,
    state_to_hex,
    to_matrix,
    to_nibbles,
)


NIBBLES = range(16)


class TestGfMultiply:
    """Tests for gf_multiply over GF(2^4) mod x^4 + x + 1."""

    @pytest.mark.parametrize("x", NIBBLES)
    def test_identity(self, x: int) -> None:
        assert gf_multiply(1, x) == x
        assert gf_multiply(x, 1) == x

    @pytest.mark.parametrize("x", NIBBLES)
    def test_zero(self, x: int) -> None:
        assert gf_multiply(0, x) == 0
        assert gf_multiply(x, 0) == 0

    @pytest.mark.parametrize("a, b, expected", [
        (2, 8, 0x3),    # x * x^3 = x^4 = x + 1
        (4, 0xE, 0xD),
        (4, 0x9, 0x2),
        (4, 0xC, 0x5),
        (9, 0xF, 0xE),
        (9, 0x6, 0x3),
        (2, 0xF, 0xD),
        (2, 0x6, 0xC),
    ])
    def test_known_products(self, a: int, b: int, expected: int) -> None:
        assert gf_multiply(a, b) == expected

    def test_commutative(self) -> None:
        for a in NIBBLES:
            for b in NIBBLES:
                assert gf_multiply(a, b) == gf_multiply(b, a)

    def test_every_nonzero_element_has_inverse(self) -> None:
        for a in range(1, 16):
            assert sum(1 for b in NIBBLES if gf_multiply(a, b) == 1) == 1

    def test_mix_matrices_are_inverse(self) -> None:
        """[[9,2],[2,9]] x [[1,4],[4,1]] must be the identity matrix."""
        for i in range(2):
            for j in range(2):
                v = (gf_multiply(INV_MIX_MATRIX[i][0], MIX_MATRIX[0][j])
                     ^ gf_multiply(INV_MIX_MATRIX[i][1], MIX_MATRIX[1][j]))
                assert v == (1 if i == j else 0)

    def test_out_of_range_rejected(self) -> None:
        with pytest.raises(ValueError, match="a must be a 4-bit value"):
            gf_multiply(16, 1)
        with pytest.raises(ValueError, match="b must be a 4-bit value"):
            gf_multiply(1, -1)

    def test_to_poly(self) -> None:
        assert to_poly(0) == "0"
        assert to_poly(0xB) == "x^3 + x + 1"
        assert to_poly(0x4) == "x^2"


class TestSBox:
    """Tests for the forward and inverse nibble S-boxes."""

    def test_tables_are_permutations(self) -> None:
        assert sorted(SBOX) == list(NIBBLES)
        assert sorted(ISBOX) == list(NIBBLES)

    @pytest.mark.parametrize("n", NIBBLES)
    def test_inverse_law(self, n: int) -> None:
        assert ISBOX[SBOX[n]] == n
        assert SBOX[ISBOX[n]] == n

    def test_substitute_nibble(self) -> None:
        assert substitute_nibble(0x9) == 0x2
        assert substitute_nibble(0x2, inverse=True) == 0x9

    @pytest.mark.parametrize("byte_val, expected", [
        (0x5F, 0x17),
        (0x82, 0x6A),
        (0xB3, 0x3B),
        (0x00, 0x99),
    ])
    def test_substitute_byte(self, byte_val: int, expected: int) -> None:
        assert substitute_byte(byte_val) == expected
        assert substitute_byte(expected, inverse=True) == byte_val

    def test_tables_are_immutable(self) -> None:
        with pytest.raises(TypeError):
            SBOX[0] = 0  # type: ignore[index]

    def test_out_of_range_rejected(self) -> None:
        with pytest.raises(ValueError):
            substitute_nibble(0x10)
        with pytest.raises(ValueError):
            substitute_byte(0x100)


class TestCodec:
    """Tests for state <-> nibbles <-> matrix conversions."""

    def test_nibble_order(self) -> None:
        assert to_nibbles(0xD728) == [0xD, 0x7, 0x2, 0x8]
        assert from_nibbles([0xD, 0x7, 0x2, 0x8]) == 0xD728

    def test_matrix_is_column_major(self) -> None:
        assert to_matrix(0xD728) == [[0xD, 0x2], [0x7, 0x8]]
        assert from_matrix([[0xD, 0x2], [0x7, 0x8]]) == 0xD728

    def test_round_trip_all_states(self) -> None:
        for s in range(0x10000):
            assert from_nibbles(to_nibbles(s)) == s
            assert from_matrix(to_matrix(s)) == s

    def test_rotate_nibbles_in_byte(self) -> None:
        assert rotate_nibbles_in_byte(0xF5) == 0x5F
        for b in range(256):
            assert rotate_nibbles_in_byte(rotate_nibbles_in_byte(b)) == b

    def test_invalid_shapes(self) -> None:
        with pytest.raises(ValueError, match="Expected 4 nibbles"):
            from_nibbles([1, 2, 3])
        with pytest.raises(ValueError, match="2x2"):
            from_matrix([[1, 2, 3], [4, 5, 6]])
        with pytest.raises(ValueError, match="nibble\\[2\\]"):
            from_nibbles([1, 2, 16, 3])

    @pytest.mark.parametrize("bad", [-1, 0x10000, True, 1.5, "12"])
    def test_invalid_state(self, bad) -> None:
        with pytest.raises(ValueError, match="state must be a 16-bit value"):
            check_state(bad)

    def test_formatting(self) -> None:
        assert state_to_hex(0x24EC) == "24EC"
        assert state_to_hex(0x38) == "0038"
        assert state_to_bin(0xD728) == "1101 0111 0010 1000"


class TestParseHexWord:
    """Tests for the forgiving hex input parser."""

    @pytest.mark.parametrize("text, expected", [
        ("D728", 0xD728),
        ("d728", 0xD728),
        ("4af", 0x4AF),
        ("0", 0),
        ("", 0),
        (None, 0),
        ("xyz", 0),
        ("12345", 0x1234),
        (" 24EC ", 0x24EC),
        ("-1", 0),
        ("-FFF", 0),
        ("+A", 0),
        ("1_2", 0),
        ("0x12", 0),
    ])
    def test_parse(self, text, expected: int) -> None:
        assert parse_hex_word(text) == expected
