"""Core package initialization."""

from srp_pake.core.constants import (
    DEFAULT_DIGEST,
    DEFAULT_GROUP,
    DEFAULT_PRIVATE_BITS,
    DEFAULT_SALT_BYTES,
    MIN_MODULUS_BITS,
    MIN_PRIVATE_BITS,
    MIN_SALT_BYTES,
)
from srp_pake.core.exceptions import (
    GroupError,
    InvalidGroup,
    InvalidPublicValue,
    InvalidScramblingParameter,
    ProofMismatch,
    SessionStateError,
    SrpError,
)

__all__ = [
    # Constants
    "DEFAULT_DIGEST",
    "DEFAULT_GROUP",
    "DEFAULT_PRIVATE_BITS",
    "DEFAULT_SALT_BYTES",
    "MIN_MODULUS_BITS",
    "MIN_PRIVATE_BITS",
    "MIN_SALT_BYTES",
    # Exceptions
    "SrpError",
    "InvalidGroup",
    "GroupError",
    "InvalidPublicValue",
    "InvalidScramblingParameter",
    "ProofMismatch",
    "SessionStateError",
]
