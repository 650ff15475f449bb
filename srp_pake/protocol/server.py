"""Server side of the SRP-6a handshake.

    Server
    (s, v) = lookup(I)
    check A mod N != 0
    B = k*v + g^b
    u = H(A | B)
    S = (A * v^u)^b
    K = H(S)
    check M1 = H(A | B | K)
    M2 = H(A | M1 | K)

States: START -> AWAITING_PROOF -> AUTHENTICATED | FAILED

Reference:
- RFC 5054 §2.5.4, §2.6
"""

from typing import Optional, Tuple, Union

from srp_pake.arithmetic.encoding import bytes_to_int, decode_public_value, pad
from srp_pake.arithmetic.modular import (
    compute_client_proof,
    compute_k,
    compute_server_proof,
    compute_session_key,
    compute_u,
    constant_time_equal,
    pow_mod,
)
from srp_pake.core.constants import DEFAULT_PRIVATE_BITS
from srp_pake.core.exceptions import ProofMismatch
from srp_pake.groups.catalog import resolve_group
from srp_pake.groups.parameters import GroupParameters
from srp_pake.hashing.digest import Digest
from srp_pake.kdf.records import IdentityStore, UserRecord
from srp_pake.protocol.base import (
    RandomSource,
    SessionState,
    SrpSession,
    draw_private_scalar,
)


Record = Union[UserRecord, Tuple[bytes, Union[int, bytes]]]


def _unpack_record(record: Record) -> Tuple[str, bytes, int]:
    """Return (identity, salt, verifier) from a record or a (salt, v) pair."""
    if isinstance(record, UserRecord):
        return record.identity, record.salt, record.verifier
    if isinstance(record, tuple) and len(record) == 2:
        salt, verifier = record
        if isinstance(verifier, (bytes, bytearray)):
            verifier = bytes_to_int(verifier)
        return "", bytes(salt), verifier
    raise TypeError(
        f"Expected UserRecord or (salt, verifier) tuple, got {type(record).__name__}"
    )


class ServerSession(SrpSession):
    """Server-side handshake state machine.

    Parameters
    ----------
    record : Union[UserRecord, Tuple[bytes, Union[int, bytes]]]
        Stored (salt, verifier) for the claimed identity. Decoy records are
        handled exactly like real ones.
    group : Union[GroupParameters, str, int]
        Group the verifier was created in.
    A : Union[bytes, int]
        Client public value, padded to len(N).
    rng : Optional[RandomSource], optional
        Secure random source for the private exponent b.
    digest : Union[str, Digest, None], optional
        Hash primitive, must match the client's.
    private_bits : int, optional
        Size of b in bits (at least 256).

    Raises
    ------
    InvalidGroup
        If ``group`` does not resolve to a group.
    InvalidPublicValue
        If A is malformed or congruent to zero modulo N. No private value
        has been drawn at that point.
    ValueError
        If the salt is empty or the verifier lies outside [1, N).
    """

    ROLE = "server"
    _SECRETS = ("_b", "_v", "_expected_m1")

    def __init__(
        self,
        record: Record,
        group: Union[GroupParameters, str, int],
        A: Union[bytes, int],
        rng: Optional[RandomSource] = None,
        digest: Union[str, Digest, None] = None,
        private_bits: int = DEFAULT_PRIVATE_BITS,
    ) -> None:
        identity, salt, verifier = _unpack_record(record)
        super().__init__(group, digest, identity)
        self._b: Optional[int] = None
        self._v: Optional[int] = None
        self._expected_m1: Optional[bytes] = None

        with self._step():
            group = self._group
            self._A = decode_public_value(A, group)
            if not salt:
                raise ValueError("Record salt cannot be empty")
            if not isinstance(verifier, int) or not 0 < verifier < group.N:
                raise ValueError("Record verifier is out of range")

            self._salt = salt
            self._v = verifier
            k = compute_k(group, self._digest)
            while True:
                self._b = draw_private_scalar(private_bits, rng)
                self._B = (k * verifier + pow_mod(group.g, self._b, group.N)) % group.N
                if self._B:
                    break
            self._set_state(SessionState.AWAITING_PROOF)

    @classmethod
    def start(
        cls,
        record: Record,
        group: Union[GroupParameters, str, int],
        A: Union[bytes, int],
        rng: Optional[RandomSource] = None,
        digest: Union[str, Digest, None] = None,
        private_bits: int = DEFAULT_PRIVATE_BITS,
    ) -> Tuple["ServerSession", bytes, bytes]:
        """Create a session and return it with the challenge (s, B).

        Returns
        -------
        Tuple[ServerSession, bytes, bytes]
            The session (AWAITING_PROOF), the salt and B padded to len(N).
        """
        session = cls(record, group, A, rng=rng, digest=digest, private_bits=private_bits)
        return session, session.salt, session.public_value

    @classmethod
    def from_store(
        cls,
        store: IdentityStore,
        identity: str,
        group: Union[GroupParameters, str, int],
        A: Union[bytes, int],
        rng: Optional[RandomSource] = None,
        digest: Union[str, Digest, None] = None,
        private_bits: int = DEFAULT_PRIVATE_BITS,
    ) -> Tuple["ServerSession", bytes, bytes]:
        """Look ``identity`` up in ``store`` and start a session.

        Stores that provide ``lookup_or_decoy`` are asked for a decoy when
        the identity is unknown.

        Raises
        ------
        LookupError
            If the store has neither a record nor a decoy for ``identity``.
        """
        params = resolve_group(group)
        if hasattr(store, "lookup_or_decoy"):
            record = store.lookup_or_decoy(identity, params, digest)
        else:
            record = store.lookup(identity)
        if record is None:
            raise LookupError(f"No record for identity {identity!r}")
        return cls.start(record, params, A, rng=rng, digest=digest, private_bits=private_bits)

    @property
    def salt(self) -> bytes:
        """User salt sent with the challenge."""
        return self._salt

    @property
    def public_value(self) -> bytes:
        """Server public value B, padded to the byte length of N."""
        return pad(self._B, self._group)

    def verify_client_proof(self, M1: bytes) -> Tuple[bytes, bytes]:
        """Check the client proof M1 and produce the server proof.

        Parameters
        ----------
        M1 : bytes
            Client proof.

        Returns
        -------
        Tuple[bytes, bytes]
            (M2, K). Send M2 to the client.

        Raises
        ------
        SessionStateError
            If the session is not AWAITING_PROOF.
        InvalidScramblingParameter
            If u = 0.
        ProofMismatch
            If M1 does not verify. No key is released.
        """
        self._require(SessionState.AWAITING_PROOF)
        with self._step():
            if not isinstance(M1, (bytes, bytearray)) or len(M1) != self._digest.digest_size:
                raise ProofMismatch()
            group = self._group
            u = compute_u(self._A, self._B, group, self._digest)
            base = (self._A * pow_mod(self._v, u, group.N)) % group.N
            S = pow_mod(base, self._b, group.N)
            K = compute_session_key(S, group, self._digest)
            self._expected_m1 = compute_client_proof(self._A, self._B, K, group, self._digest)
            self._b = None
            self._v = None

            if not constant_time_equal(bytes(M1), self._expected_m1):
                raise ProofMismatch()

            M2 = compute_server_proof(self._A, bytes(M1), K, group, self._digest)
            self._expected_m1 = None
            self._session_key = K
            self._set_state(SessionState.AUTHENTICATED)
        return M2, K
