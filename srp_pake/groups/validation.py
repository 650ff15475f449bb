"""Validation of caller-supplied SRP groups.

A usable SRP group needs a safe prime modulus N = 2q + 1 (q prime) and a
generator g of a large subgroup. For a safe prime the multiplicative group
has order 2q, so every element outside {0, 1, N-1} has order q or 2q.

Primality is decided with ``sympy.isprime`` (Baillie-PSW, deterministic
below 2^64 and without known counterexamples above).
"""

from sympy import isprime

from srp_pake.core.constants import MIN_MODULUS_BITS
from srp_pake.core.exceptions import InvalidGroup


def _require_int(value: object, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidGroup(f"{label} must be an integer, got {type(value).__name__}")
    return value


def validate_group(N: int, g: int, min_bits: int = MIN_MODULUS_BITS) -> None:
    """Check that (N, g) is a valid SRP group.

    Parameters
    ----------
    N : int
        Candidate modulus.
    g : int
        Candidate generator.
    min_bits : int, optional
        Smallest accepted modulus size in bits.

    Raises
    ------
    InvalidGroup
        If N is too small, not prime, not a safe prime, or g does not
        generate a large subgroup.

    Notes
    -----
    Cheap structural checks run before the primality tests, which dominate
    the cost for large moduli.
    """
    N = _require_int(N, "N")
    g = _require_int(g, "g")

    if N <= 3 or N % 2 == 0:
        raise InvalidGroup("Modulus must be an odd integer greater than 3")
    if N.bit_length() < min_bits:
        raise InvalidGroup(
            f"Modulus is {N.bit_length()} bits, at least {min_bits} bits required"
        )
    if not 1 < g < N - 1:
        raise InvalidGroup("Generator must satisfy 1 < g < N - 1")

    if not isprime(N):
        raise InvalidGroup("Modulus is not prime")
    if not isprime((N - 1) // 2):
        raise InvalidGroup("Modulus is not a safe prime")

    # Order 1 or 2 is excluded by the range check; keep the invariant explicit
    if pow(g, 2, N) == 1:
        raise InvalidGroup("Generator has order at most 2")


def is_valid_group(N: int, g: int, min_bits: int = MIN_MODULUS_BITS) -> bool:
    """Return True if ``validate_group`` accepts (N, g)."""
    try:
        validate_group(N, g, min_bits=min_bits)
    except InvalidGroup:
        return False
    return True
