"""Exceptions raised by the SRP engine.

Every error raised inside a handshake is terminal for the session that
raised it: the session moves to ``FAILED`` and the caller has to start a
fresh handshake. Messages never contain secret material.
"""


class SrpError(Exception):
    """Base exception for SRP protocol failures."""


class InvalidGroup(SrpError):
    """Raised when (N, g) is not a usable SRP group.

    N must be a safe prime of at least the minimum modulus size and g must
    generate a large subgroup modulo N.
    """


# Alias
GroupError = InvalidGroup


class InvalidPublicValue(SrpError):
    """Raised when a public ephemeral value (A or B) is malformed.

    Covers values congruent to zero modulo N, values out of range and
    non-canonical encodings (wrong length).
    """


class InvalidScramblingParameter(SrpError):
    """Raised when the scrambling parameter u = H(A || B) is zero."""


class ProofMismatch(SrpError):
    """Raised when a key-confirmation proof (M1 or M2) does not verify.

    The message is the same for every cause.
    """

    def __init__(self, message: str = "Proof verification failed") -> None:
        super().__init__(message)


class SessionStateError(SrpError):
    """Raised when a session method is called out of order or after the
    session reached a terminal state."""
