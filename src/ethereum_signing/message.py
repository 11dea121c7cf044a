"""
Framing of arbitrary data for personal-message signatures.

The prefix keeps a signed message from ever being a valid transaction
signing pre-image.
"""

MESSAGE_PREFIX = b"\x19Ethereum Signed Message:\n"


def add_message_prefix(data: bytes) -> bytes:
    """
    Return `data` preceded by the personal-message prefix and the decimal
    length of `data`.
    """
    data = bytes(data)
    return MESSAGE_PREFIX + str(len(data)).encode("ascii") + data
