"""Private key and verifier derivation.

The private exponent is derived in two steps:

    inner = PH(I, P, s)        (pluggable password hasher)
    x     = H(s | inner)

With the default hasher PH(I, P, s) = H(I | ":" | P), this is the RFC 5054
form x = H(s | H(I | ":" | P)). Swapping the hasher for a memory-hard
function (scrypt) leaves the outer protocol unchanged.

Reference:
- RFC 5054 §2.4
- RFC 7914 (scrypt)
"""

import abc
import secrets
from typing import Callable, Optional, Union

from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from srp_pake.core.constants import (
    DEFAULT_SALT_BYTES,
    IDENTITY_SEPARATOR,
    MIN_SALT_BYTES,
    SCRYPT_LENGTH,
    SCRYPT_N,
    SCRYPT_P,
    SCRYPT_R,
)
from srp_pake.groups.parameters import GroupParameters
from srp_pake.hashing.digest import Digest, get_digest


Secret = Union[str, bytes]


def to_bytes(value: Secret) -> bytes:
    """UTF-8 encode strings; pass bytes through unchanged."""
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    raise TypeError(f"Expected str or bytes, got {type(value).__name__}")


class PasswordHasher(abc.ABC):
    """Strategy producing the inner hash of the private key derivation."""

    @abc.abstractmethod
    def __call__(self, identity: bytes, password: bytes, salt: bytes) -> bytes:
        """Return the inner hash for (identity, password, salt)."""
        raise NotImplementedError


class Rfc5054PasswordHasher(PasswordHasher):
    """Inner hash H(I | ":" | P) as described in RFC 5054.

    Parameters
    ----------
    digest : Union[str, Digest, None]
        Digest to use; should match the session digest.
    """

    def __init__(self, digest: Union[str, Digest, None] = None) -> None:
        self._digest = get_digest(digest)

    def __repr__(self) -> str:
        return f"Rfc5054PasswordHasher({self._digest.name!r})"

    def __call__(self, identity: bytes, password: bytes, salt: bytes) -> bytes:
        return self._digest.hash(identity, IDENTITY_SEPARATOR, password)


class ScryptPasswordHasher(PasswordHasher):
    """Memory-hard inner hash: scrypt(I | ":" | P, salt).

    Parameters
    ----------
    n : int, optional
        CPU/memory cost (power of two).
    r : int, optional
        Block size.
    p : int, optional
        Parallelization factor.
    length : int, optional
        Output length in bytes.

    Notes
    -----
    Registration and login must use identical parameters, otherwise the
    verifier and the client's x disagree and the handshake ends in a proof
    mismatch.
    """

    def __init__(
        self,
        n: int = SCRYPT_N,
        r: int = SCRYPT_R,
        p: int = SCRYPT_P,
        length: int = SCRYPT_LENGTH,
    ) -> None:
        self.n = n
        self.r = r
        self.p = p
        self.length = length

    def __repr__(self) -> str:
        return f"ScryptPasswordHasher(n={self.n}, r={self.r}, p={self.p}, length={self.length})"

    def __call__(self, identity: bytes, password: bytes, salt: bytes) -> bytes:
        kdf = Scrypt(salt=salt, length=self.length, n=self.n, r=self.r, p=self.p)
        return kdf.derive(identity + IDENTITY_SEPARATOR + password)


def derive_private_key(
    identity: Secret,
    password: Secret,
    salt: bytes,
    digest: Union[str, Digest, None] = None,
    hasher: Optional[PasswordHasher] = None,
) -> int:
    """Derive the private exponent x.

    Parameters
    ----------
    identity : Union[str, bytes]
        User identity I.
    password : Union[str, bytes]
        Password P.
    salt : bytes
        Per-user salt s.
    digest : Union[str, Digest, None], optional
        Outer hash H. Defaults to the engine digest.
    hasher : Optional[PasswordHasher], optional
        Inner password hasher. Defaults to ``Rfc5054PasswordHasher`` using
        the same digest.

    Returns
    -------
    int
        x = H(s | PH(I, P, s)) as a big-endian integer.
    """
    digest = get_digest(digest)
    if hasher is None:
        hasher = Rfc5054PasswordHasher(digest)
    salt = to_bytes(salt)
    inner = hasher(to_bytes(identity), to_bytes(password), salt)
    return digest.hash_to_int(salt, inner)


def derive_verifier(x: int, group: GroupParameters) -> int:
    """Compute the verifier v = g^x mod N."""
    return pow(group.g, x, group.N)


def generate_salt(
    length: int = DEFAULT_SALT_BYTES,
    rng: Optional[Callable[[int], bytes]] = None,
) -> bytes:
    """Generate a random salt.

    Parameters
    ----------
    length : int, optional
        Salt length in bytes (default 16, minimum 8).
    rng : Optional[Callable[[int], bytes]], optional
        Secure random source. Defaults to ``secrets.token_bytes``.

    Raises
    ------
    ValueError
        If ``length`` is below the minimum.
    RuntimeError
        If the random source returns fewer bytes than requested.
    """
    if length < MIN_SALT_BYTES:
        raise ValueError(f"Salt must be at least {MIN_SALT_BYTES} bytes")
    salt = (rng or secrets.token_bytes)(length)
    if len(salt) != length:
        raise RuntimeError("Random source returned a short read")
    return bytes(salt)
