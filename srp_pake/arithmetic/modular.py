"""Modular arithmetic and SRP-6a derived values.

Functions here are pure: they depend only on their arguments. Values follow
the RFC 5054 conventions:

    k  = H(PAD(N) | PAD(g))
    u  = H(PAD(A) | PAD(B))
    K  = H(PAD(S))
    M1 = H(PAD(A) | PAD(B) | K)
    M2 = H(PAD(A) | M1 | K)

Reference:
- RFC 5054 §2.5.3, §2.6
- SRP-6 paper (Wu, 2002) for M1/M2
"""

import hmac

from srp_pake.arithmetic.encoding import pad
from srp_pake.core.exceptions import InvalidScramblingParameter
from srp_pake.groups.parameters import GroupParameters
from srp_pake.hashing.digest import Digest


def pow_mod(base: int, exp: int, modulus: int) -> int:
    """Compute ``base ** exp % modulus``.

    Uses the interpreter's arbitrary-precision exponentiation, which runs a
    fixed windowed schedule over the exponent bits.

    Raises
    ------
    ValueError
        If ``modulus`` is not greater than 1 or ``exp`` is negative.
    """
    if modulus <= 1:
        raise ValueError("Modulus must be greater than 1")
    if exp < 0:
        raise ValueError("Exponent must be non-negative")
    return pow(base, exp, modulus)


def compute_k(group: GroupParameters, digest: Digest) -> int:
    """Multiplier parameter k = H(PAD(N) | PAD(g))."""
    return digest.hash_to_int(pad(group.N, group), pad(group.g, group))


def compute_u(A: int, B: int, group: GroupParameters, digest: Digest) -> int:
    """Scrambling parameter u = H(PAD(A) | PAD(B)).

    Raises
    ------
    InvalidScramblingParameter
        If u is zero, which would remove the verifier from the shared secret.
    """
    u = digest.hash_to_int(pad(A, group), pad(B, group))
    if u == 0:
        raise InvalidScramblingParameter("Scrambling parameter u is zero")
    return u


def compute_session_key(S: int, group: GroupParameters, digest: Digest) -> bytes:
    """Session key K = H(PAD(S))."""
    return digest.hash(pad(S, group))


def compute_client_proof(
    A: int, B: int, K: bytes, group: GroupParameters, digest: Digest
) -> bytes:
    """Client proof M1 = H(PAD(A) | PAD(B) | K)."""
    return digest.hash(pad(A, group), pad(B, group), K)


def compute_server_proof(
    A: int, M1: bytes, K: bytes, group: GroupParameters, digest: Digest
) -> bytes:
    """Server proof M2 = H(PAD(A) | M1 | K)."""
    return digest.hash(pad(A, group), M1, K)


def constant_time_equal(a: bytes, b: bytes) -> bool:
    """Compare two byte strings without early exit."""
    return hmac.compare_digest(a, b)
