"""Shared machinery for the client and server state machines.

Both sides carry secret material across several calls. The base class owns
the state, the bound group and digest, the failure path and the clearing of
secrets.

Notes
-----
Python integers are immutable, so "clearing" a secret means dropping every
reference the session holds. The memory is reclaimed by the interpreter.
"""

import secrets
from contextlib import contextmanager
from enum import Enum
from typing import Callable, Iterator, Optional, Tuple, Union

from srp_pake.core.constants import MIN_PRIVATE_BITS
from srp_pake.core.exceptions import SessionStateError
from srp_pake.groups.catalog import resolve_group
from srp_pake.groups.parameters import GroupParameters
from srp_pake.hashing.digest import Digest, get_digest
from srp_pake.utils.logging import get_session_logger


RandomSource = Callable[[int], bytes]


class SessionState(Enum):
    """Handshake states shared by both roles."""

    START = "start"
    AWAITING_CHALLENGE = "awaiting_challenge"  # client: A sent
    PROOF_SENT = "proof_sent"  # client: M1 sent
    AWAITING_PROOF = "awaiting_proof"  # server: B sent
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


TERMINAL_STATES = (SessionState.AUTHENTICATED, SessionState.FAILED)


def draw_private_scalar(bits: int, rng: Optional[RandomSource] = None) -> int:
    """Draw a random private exponent of ``bits`` bits.

    Parameters
    ----------
    bits : int
        Entropy in bits; at least ``MIN_PRIVATE_BITS``.
    rng : Optional[RandomSource], optional
        Secure random source ``rng(num_bytes) -> bytes``. Defaults to
        ``secrets.token_bytes``.

    Returns
    -------
    int
        Non-zero random integer.

    Raises
    ------
    ValueError
        If fewer than ``MIN_PRIVATE_BITS`` bits are requested.
    RuntimeError
        If the random source returns a short read.
    """
    if bits < MIN_PRIVATE_BITS:
        raise ValueError(f"Private scalars need at least {MIN_PRIVATE_BITS} bits")
    num_bytes = (bits + 7) // 8
    source = rng or secrets.token_bytes
    while True:
        data = source(num_bytes)
        if len(data) != num_bytes:
            raise RuntimeError("Random source returned a short read")
        value = int.from_bytes(data, "big") >> (num_bytes * 8 - bits)
        if value:
            return value


class SrpSession:
    """Base class for one side of one handshake.

    Parameters
    ----------
    group : Union[GroupParameters, str, int]
        Group parameters or a catalog name.
    digest : Union[str, Digest, None]
        Hash primitive bound for the whole session.
    identity : str
        User identity, used for logging only on the server side.

    Attributes
    ----------
    ROLE : str
        "client" or "server" (set by subclasses).
    _SECRETS : Tuple[str, ...]
        Attribute names cleared when the session fails or closes.

    Notes
    -----
    Sessions are single-use and not thread-safe. Any exception raised by a
    protocol step moves the session to FAILED; a FAILED session rejects
    every further call with ``SessionStateError``.
    """

    ROLE: str = "session"
    _SECRETS: Tuple[str, ...] = ()

    def __init__(
        self,
        group: Union[GroupParameters, str, int],
        digest: Union[str, Digest, None],
        identity: str,
    ) -> None:
        self._state = SessionState.START
        self._group = resolve_group(group)
        self._digest = get_digest(digest)
        self._identity = identity
        self._session_key: Optional[bytes] = None
        self._logger = get_session_logger(self.ROLE)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(identity={self._identity!r}, "
            f"group={self._group.name!r}, state={self._state.value})"
        )

    def __enter__(self) -> "SrpSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self) -> None:
        self._clear_secrets()

    # ------------------------------------------------------------------
    # Public properties
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        """Current handshake state."""
        return self._state

    @property
    def identity(self) -> str:
        """User identity for this handshake."""
        return self._identity

    @property
    def group(self) -> GroupParameters:
        """Group parameters bound to this session."""
        return self._group

    @property
    def digest(self) -> Digest:
        """Digest bound to this session."""
        return self._digest

    @property
    def is_authenticated(self) -> bool:
        """True once the peer's proof has been verified."""
        return self._state is SessionState.AUTHENTICATED

    @property
    def session_key(self) -> bytes:
        """Shared session key K.

        Raises
        ------
        SessionStateError
            Unless the session is AUTHENTICATED and still open.
        """
        if self._state is not SessionState.AUTHENTICATED or self._session_key is None:
            raise SessionStateError("Session key is only available after authentication")
        return self._session_key

    def close(self) -> None:
        """Clear every secret, including the session key.

        A session closed before completion becomes FAILED.
        """
        self._clear_secrets()
        self._session_key = None
        if self._state not in TERMINAL_STATES:
            self._set_state(SessionState.FAILED)

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    def _set_state(self, state: SessionState) -> None:
        self._logger.debug(
            f"{self._identity!r} [{self._group.name}] {self._state.value} -> {state.value}"
        )
        self._state = state

    def _require(self, *states: SessionState) -> None:
        if self._state in states:
            return
        expected = ", ".join(s.value for s in states)
        error = SessionStateError(
            f"Operation requires state {expected}, session is {self._state.value}"
        )
        if self._state not in TERMINAL_STATES:
            self._fail(error)
        raise error

    def _fail(self, error: Exception) -> None:
        self._logger.warning(
            f"Handshake for {self._identity!r} failed: {type(error).__name__}"
        )
        self._clear_secrets()
        self._session_key = None
        self._state = SessionState.FAILED

    @contextmanager
    def _step(self) -> Iterator[None]:
        """Run one protocol step; any exception fails the session."""
        try:
            yield
        except Exception as exc:
            if self._state is not SessionState.FAILED:
                self._fail(exc)
            raise

    def _clear_secrets(self) -> None:
        for name in self._SECRETS:
            setattr(self, name, None)
