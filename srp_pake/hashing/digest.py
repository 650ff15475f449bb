"""Digest strategy used for every hash in the protocol.

The engine is generic over one hash primitive per deployment. A ``Digest``
wraps a ``hashlib`` algorithm behind reset/update/finalize semantics so
that k, u, the inner password hash, K, M1 and M2 all go through the same
primitive.

Reference:
- RFC 5054 §2.4 (H() is SHA-1 in the RFC; any fixed hash may be used)
"""

import hashlib
from typing import Union

from srp_pake.core.constants import DEFAULT_DIGEST


SUPPORTED_DIGESTS = ("sha1", "sha256", "sha384", "sha512", "sha3_256", "blake2b")


class Digest:
    """Stateful hash strategy with reset/update/finalize semantics.

    Parameters
    ----------
    name : str
        ``hashlib`` algorithm name, one of ``SUPPORTED_DIGESTS``.

    Attributes
    ----------
    name : str
        Algorithm name.
    digest_size : int
        Output length in bytes.

    Notes
    -----
    ``finalize`` resets the internal state, so one instance can be reused
    for consecutive hashes. The one-shot helpers ``hash`` and
    ``hash_to_int`` never touch the incremental state.

    Examples
    --------
    >>> d = Digest("sha256")
    >>> d.update(b"abc")
    >>> len(d.finalize())
    32
    """

    def __init__(self, name: str) -> None:
        name = name.lower().replace("-", "")
        if name == "sha3256":
            name = "sha3_256"
        if name not in SUPPORTED_DIGESTS:
            raise ValueError(
                f"Unsupported digest '{name}', expected one of {SUPPORTED_DIGESTS}"
            )
        self.name = name
        self._state = hashlib.new(name)
        self.digest_size = self._state.digest_size

    def __repr__(self) -> str:
        return f"Digest({self.name!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Digest) and other.name == self.name

    def __hash__(self) -> int:
        return hash(self.name)

    def reset(self) -> None:
        """Discard any data fed so far."""
        self._state = hashlib.new(self.name)

    def update(self, data: bytes) -> None:
        """Feed bytes into the running hash.

        Raises
        ------
        TypeError
            If ``data`` is not bytes-like. Integers must be encoded with
            the fixed-width encoding first.
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(
                f"Digest.update expects bytes, got {type(data).__name__}"
            )
        self._state.update(data)

    def finalize(self) -> bytes:
        """Return the digest of everything fed since the last reset and reset."""
        result = self._state.digest()
        self.reset()
        return result

    def hash(self, *parts: bytes) -> bytes:
        """Hash the concatenation of ``parts`` in one call."""
        h = hashlib.new(self.name)
        for part in parts:
            if not isinstance(part, (bytes, bytearray, memoryview)):
                raise TypeError(
                    f"Digest.hash expects bytes, got {type(part).__name__}"
                )
            h.update(part)
        return h.digest()

    def hash_to_int(self, *parts: bytes) -> int:
        """Hash ``parts`` and interpret the digest as a big-endian integer."""
        return int.from_bytes(self.hash(*parts), "big")


def get_digest(digest: Union[str, Digest, None] = None) -> Digest:
    """Resolve a digest name (or instance) to a ``Digest``.

    Parameters
    ----------
    digest : Union[str, Digest, None]
        Algorithm name, an existing ``Digest``, or None for the default.

    Returns
    -------
    Digest
        A fresh ``Digest`` for the algorithm.

    Raises
    ------
    ValueError
        If the algorithm is not supported.
    """
    if digest is None:
        return Digest(DEFAULT_DIGEST)
    if isinstance(digest, Digest):
        return Digest(digest.name)
    return Digest(digest)
