"""Hash primitive used by the protocol.

Classes
-------
Digest
    reset/update/finalize wrapper over a ``hashlib`` algorithm.

Functions
---------
get_digest
    Resolve a digest name to a ``Digest`` instance.
"""

from srp_pake.hashing.digest import SUPPORTED_DIGESTS, Digest, get_digest

__all__ = [
    "Digest",
    "get_digest",
    "SUPPORTED_DIGESTS",
]
