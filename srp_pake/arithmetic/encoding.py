"""Fixed-width big-endian integer encoding.

Every integer mixed into a hash (N, g, A, B, S) is padded to the byte length
of N. Both sides must use the same width or their hashes silently diverge.

Reference:
- RFC 5054 §2.1 (PAD() definition)
"""

from typing import Union

from srp_pake.core.exceptions import InvalidPublicValue
from srp_pake.groups.parameters import GroupParameters


def byte_length(n: int) -> int:
    """Number of bytes needed to hold ``n`` (at least 1).

    Parameters
    ----------
    n : int
        Non-negative integer.

    Returns
    -------
    int
        Minimal big-endian byte length.
    """
    if n < 0:
        raise ValueError("byte_length is undefined for negative integers")
    return max(1, (n.bit_length() + 7) // 8)


def int_to_bytes(value: int, length: int) -> bytes:
    """Encode ``value`` as exactly ``length`` big-endian bytes.

    Raises
    ------
    ValueError
        If ``value`` is negative or does not fit in ``length`` bytes.
    """
    if value < 0:
        raise ValueError("Cannot encode a negative integer")
    if value.bit_length() > length * 8:
        raise ValueError(f"Integer does not fit in {length} bytes")
    return value.to_bytes(length, "big")


def bytes_to_int(data: bytes) -> int:
    """Decode big-endian bytes into a non-negative integer."""
    return int.from_bytes(data, "big")


def pad(value: int, group: GroupParameters) -> bytes:
    """Encode ``value`` padded to the byte length of the group modulus.

    Examples
    --------
    >>> from srp_pake.groups import lookup
    >>> len(pad(2, lookup("2048")))
    256
    """
    return int_to_bytes(value, group.byte_length)


def decode_public_value(data: Union[bytes, int], group: GroupParameters) -> int:
    """Validate and decode a received public ephemeral value (A or B).

    Parameters
    ----------
    data : Union[bytes, int]
        Padded big-endian encoding (exactly ``group.byte_length`` bytes) or
        an already decoded integer.
    group : GroupParameters
        Group the value belongs to.

    Returns
    -------
    int
        The public value, guaranteed to satisfy 0 < value < N.

    Raises
    ------
    InvalidPublicValue
        If the encoding has the wrong length, the value is not reduced
        modulo N, or the value is congruent to zero modulo N.

    Notes
    -----
    Checks run before the value participates in any arithmetic.
    """
    if isinstance(data, (bytes, bytearray, memoryview)):
        data = bytes(data)
        if len(data) != group.byte_length:
            raise InvalidPublicValue(
                f"Public value must be {group.byte_length} bytes, got {len(data)}"
            )
        value = bytes_to_int(data)
    elif isinstance(data, int) and not isinstance(data, bool):
        value = data
    else:
        raise InvalidPublicValue(
            f"Public value must be bytes or int, got {type(data).__name__}"
        )

    if value < 0 or value >= group.N:
        raise InvalidPublicValue("Public value is out of range")
    if value % group.N == 0:
        raise InvalidPublicValue("Public value is congruent to zero modulo N")
    return value
