"""
S-AES round transformations and the two-round encrypt/decrypt pipelines.

Operation schedules:
- Encrypt: AddRoundKey(K0) | SubNibbles -> ShiftRow -> MixColumns -> AddRoundKey(K1)
           | SubNibbles -> ShiftRow -> AddRoundKey(K2)
- Decrypt: AddRoundKey(K2) | ShiftRow -> InvSubNibbles -> AddRoundKey(K1) -> InvMixColumns
           | ShiftRow -> InvSubNibbles -> AddRoundKey(K0)

ShiftRow swaps the two nibbles of the second row, so the same function
serves both directions.
"""

from typing import Iterator

from .gf import INV_MIX_MATRIX, MIX_MATRIX, gf_multiply
from .key_schedule import KeySchedule, expand_key
from .sbox import substitute_nibble
from .utils import check_state, from_matrix, from_nibbles, to_matrix, to_nibbles


# (operation, round key index or None)
ENCRYPT_SCHEDULE = (
    ("AddRoundKey", 0),
    ("SubNibbles", None),
    ("ShiftRow", None),
    ("MixColumns", None),
    ("AddRoundKey", 1),
    ("SubNibbles", None),
    ("ShiftRow", None),
    ("AddRoundKey", 2),
)

DECRYPT_SCHEDULE = (
    ("AddRoundKey", 2),
    ("ShiftRow", None),
    ("InvSubNibbles", None),
    ("AddRoundKey", 1),
    ("InvMixColumns", None),
    ("ShiftRow", None),
    ("InvSubNibbles", None),
    ("AddRoundKey", 0),
)


def add_round_key(state: int, round_key: int) -> int:
    """XOR the state with a 16-bit round key."""
    check_state(state)
    check_state(round_key, "round_key")
    return state ^ round_key


def substitute_nibbles(state: int, inverse: bool = False) -> int:
    """Apply the (inverse) S-box to each of the four nibbles."""
    return from_nibbles([substitute_nibble(n, inverse) for n in to_nibbles(state)])


def shift_row(state: int) -> int:
    """Swap the two nibbles of the second matrix row (n1 <-> n3)."""
    m = to_matrix(state)
    m[1][0], m[1][1] = m[1][1], m[1][0]
    return from_matrix(m)


def _mix(state: int, constants: tuple[tuple[int, int], tuple[int, int]]) -> int:
    m = to_matrix(state)
    out = [[0, 0], [0, 0]]
    for col in range(2):
        for row in range(2):
            out[row][col] = (
                gf_multiply(constants[row][0], m[0][col])
                ^ gf_multiply(constants[row][1], m[1][col])
            )
    return from_matrix(out)


def mix_columns(state: int) -> int:
    """Multiply each column by [[1, 4], [4, 1]] over GF(2^4)."""
    return _mix(state, MIX_MATRIX)


def inv_mix_columns(state: int) -> int:
    """Multiply each column by [[9, 2], [2, 9]] over GF(2^4)."""
    return _mix(state, INV_MIX_MATRIX)


def apply_operation(operation: str, state: int, round_key: int | None = None) -> int:
    """
    Apply one named pipeline operation to the state.

    Raises:
        ValueError: unknown operation, or AddRoundKey without a round key
    """
    if operation == "AddRoundKey":
        if round_key is None:
            raise ValueError("AddRoundKey requires a round key")
        return add_round_key(state, round_key)
    elif operation == "SubNibbles":
        return substitute_nibbles(state)
    elif operation == "InvSubNibbles":
        return substitute_nibbles(state, inverse=True)
    elif operation == "ShiftRow":
        return shift_row(state)
    elif operation == "MixColumns":
        return mix_columns(state)
    elif operation == "InvMixColumns":
        return inv_mix_columns(state)
    raise ValueError(f"Unknown operation: {operation}")


def run_schedule(
    state: int,
    key_schedule: KeySchedule,
    schedule: tuple[tuple[str, int | None], ...],
) -> Iterator[tuple[str, int | None, int]]:
    """
    Run a schedule step by step.

    Yields:
        (operation, round key used or None, state after the operation)
    """
    check_state(state)
    for operation, key_index in schedule:
        round_key = key_schedule.round_key(key_index) if key_index is not None else None
        state = apply_operation(operation, state, round_key)
        yield operation, round_key, state


def encrypt(plaintext: int, key: int) -> int:
    """
    Encrypt one 16-bit block.

    Args:
        plaintext: 16-bit plaintext
        key: 16-bit key

    Returns:
        16-bit ciphertext
    """
    check_state(plaintext, "plaintext")
    state = plaintext
    for _, _, state in run_schedule(plaintext, expand_key(key), ENCRYPT_SCHEDULE):
        pass
    return state


def decrypt(ciphertext: int, key: int) -> int:
    """
    Decrypt one 16-bit block.

    Args:
        ciphertext: 16-bit ciphertext
        key: 16-bit key

    Returns:
        16-bit plaintext
    """
    check_state(ciphertext, "ciphertext")
    state = ciphertext
    for _, _, state in run_schedule(ciphertext, expand_key(key), DECRYPT_SCHEDULE):
        pass
    return state
