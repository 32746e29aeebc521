"""Published S-AES known-answer vectors and validation helpers."""

from .key_schedule import expand_key
from .saes_core import decrypt, encrypt
from .utils import state_to_hex


# Stallings, "Cryptography and Network Security", S-AES worked example;
# Musa, Schaefer, Wedig, "A Simplified AES Algorithm" (Cryptologia, 2003).
KNOWN_ANSWER_VECTORS = [
    {
        "key": 0x4AF5,
        "plaintext": 0xD728,
        "ciphertext": 0x24EC,
        "round_keys": (0x4AF5, 0xDD28, 0x87AF),
    },
    {
        "key": 0xA73B,
        "plaintext": 0x6F6B,
        "ciphertext": 0x0738,
        "round_keys": (0xA73B, 0x1C27, 0x7651),
    },
]


def validate_vector(vector: dict) -> tuple[bool, str]:
    """Check key schedule, encryption and decryption against one vector.

    Returns:
        Tuple of (is_correct, error_detail)
    """
    round_keys = expand_key(vector["key"]).round_keys
    if round_keys != vector["round_keys"]:
        return False, (
            "Round key mismatch: expected "
            f"{' '.join(state_to_hex(k) for k in vector['round_keys'])}, "
            f"got {' '.join(state_to_hex(k) for k in round_keys)}"
        )

    ciphertext = encrypt(vector["plaintext"], vector["key"])
    if ciphertext != vector["ciphertext"]:
        return False, (
            f"Ciphertext mismatch: expected {state_to_hex(vector['ciphertext'])}, "
            f"got {state_to_hex(ciphertext)}"
        )

    plaintext = decrypt(vector["ciphertext"], vector["key"])
    if plaintext != vector["plaintext"]:
        return False, (
            f"Plaintext mismatch: expected {state_to_hex(vector['plaintext'])}, "
            f"got {state_to_hex(plaintext)}"
        )

    return True, ""


def validate_round_trip(plaintext: int, key: int) -> tuple[bool, str]:
    """Check that decrypt(encrypt(plaintext, key), key) == plaintext."""
    ciphertext = encrypt(plaintext, key)
    recovered = decrypt(ciphertext, key)
    if recovered == plaintext:
        return True, ""
    return False, (
        f"Round trip failed for pt={state_to_hex(plaintext)} key={state_to_hex(key)}: "
        f"ct={state_to_hex(ciphertext)} -> {state_to_hex(recovered)}"
    )
