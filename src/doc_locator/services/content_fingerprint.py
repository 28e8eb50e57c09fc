"""Short rolling fingerprint of a text snippet, used to detect content drift."""

DEFAULT_FINGERPRINT_LENGTH = 100

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value >= 0x80000000 else value


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    value = abs(value)
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return sign + "".join(reversed(digits))


def compute_fingerprint(text: str, length: int = DEFAULT_FINGERPRINT_LENGTH) -> str:
    """
    Hash the first ``length`` UTF-16 code units of ``text``.

    The hash is the 32-bit ``h = h * 31 + unit`` polynomial, rendered in signed
    base 36, so fingerprints stay a handful of characters long. Characters
    outside the BMP count as two surrogate units, as in browser strings.

    >>> compute_fingerprint("")
    '0'
    >>> compute_fingerprint("a")
    '2p'
    >>> compute_fingerprint("Hello world") == compute_fingerprint("Hello world, again", 11)
    True
    """
    encoded = text.encode("utf-16-le")[: length * 2]
    value = 0
    for i in range(0, len(encoded) - 1, 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        value = _to_int32(value * 31 + unit)
    return _to_base36(value)
