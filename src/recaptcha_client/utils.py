import base64
from typing import Union, Tuple, List

BytesLike = Union[str, bytes, bytearray, memoryview]


def as_bytes(data: BytesLike, *, encoding: str = "utf-8") -> bytes:
    """Normalize values to type bytes."""
    if isinstance(data, bytes):
        return data
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, str):
        return data.encode(encoding)
    raise TypeError(f"Expected str or bytes-like, got {type(data).__name__}")


def encode_url_safe(data: BytesLike) -> str:
    """Standard base64 with '+' and '/' swapped for '-' and '_'. '=' padding is kept."""
    return base64.urlsafe_b64encode(as_bytes(data)).decode("ascii")


def decode_url_safe(text: str) -> bytes:
    """Decode URL-safe base64. Tolerates missing '=' padding."""
    missing = len(text) % 4
    if missing:
        text += "=" * (4 - missing)
    return base64.urlsafe_b64decode(text)


def parse_key_values(pairs: List[str]) -> List[Tuple[str, str]]:
    """Split KEY=VALUE strings from the command line."""
    parsed = []
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected KEY=VALUE, got {pair!r}")
        parsed.append((key, value))
    return parsed
