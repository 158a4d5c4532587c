import base64
import binascii

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
import structlog

from recaptcha_client.errors import InvalidKeyError, PaddingError


log = structlog.get_logger()

BLOCK_SIZE = 16
KEY_SIZE = 16

# The MailHide decoder expects a fixed all-zero IV.
ZERO_IV = bytes(BLOCK_SIZE)


def _check_block_size(block_size: int) -> None:
    if not 1 <= block_size <= 255:
        raise ValueError(f"Invalid block size: {block_size}")


def pad(data: bytes, block_size: int = BLOCK_SIZE) -> bytes:
    """PKCS#7 pad `data` to a multiple of `block_size` bytes.
    Aligned input gets a full extra block of padding."""
    _check_block_size(block_size)
    padder = padding.PKCS7(block_size * 8).padder()
    return padder.update(data) + padder.finalize()


def unpad(data: bytes, block_size: int = BLOCK_SIZE) -> bytes:
    """Strip PKCS#7 padding, raising PaddingError when it is malformed."""
    _check_block_size(block_size)
    unpadder = padding.PKCS7(block_size * 8).unpadder()
    try:
        return unpadder.update(data) + unpadder.finalize()
    except ValueError as e:
        raise PaddingError("Invalid padding bytes.") from e


def derive_key(private_key: str) -> bytes:
    """Hex-decode a MailHide private key into raw AES-128 key bytes."""
    try:
        key = base64.b16decode(private_key, casefold=True)
    except (binascii.Error, TypeError, ValueError) as e:
        raise InvalidKeyError("Private key is not a valid hex string") from e

    if len(key) != KEY_SIZE:
        raise InvalidKeyError(f"Expecting a key of length {KEY_SIZE}, got {len(key)}")
    return key


def _cipher(key: bytes) -> Cipher:
    if len(key) != KEY_SIZE:
        raise InvalidKeyError(f"Expecting a key of length {KEY_SIZE}, got {len(key)}")
    return Cipher(algorithms.AES(key), modes.CBC(ZERO_IV))


def encrypt(plaintext: bytes, key: bytes) -> bytes:
    """AES-128-CBC encrypt already padded `plaintext` with a zero IV.
    No padding is applied here; the caller pads first."""
    if len(plaintext) % BLOCK_SIZE:
        raise PaddingError(
            f"Plaintext length {len(plaintext)} is not a multiple of {BLOCK_SIZE}"
        )

    encryptor = _cipher(key).encryptor()
    ciphertext = encryptor.update(plaintext) + encryptor.finalize()
    log.debug("encrypted", plaintext_len=len(plaintext), ciphertext_len=len(ciphertext))
    return ciphertext


def decrypt(ciphertext: bytes, key: bytes) -> bytes:
    """Inverse of `encrypt`. The result still carries its padding."""
    if len(ciphertext) % BLOCK_SIZE:
        raise PaddingError(
            f"Ciphertext length {len(ciphertext)} is not a multiple of {BLOCK_SIZE}"
        )

    decryptor = _cipher(key).decryptor()
    return decryptor.update(ciphertext) + decryptor.finalize()
