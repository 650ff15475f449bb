"""Client side of the SRP-6a handshake.

    Client                                  Server
    A = g^a                 -- I, A -->
                            <-- s, B --
    u = H(A | B)
    x = H(s | PH(I, P, s))
    S = (B - k*g^x)^(a + u*x)
    K = H(S)
    M1 = H(A | B | K)       -- M1 -->
                            <-- M2 --
    verify M2 = H(A | M1 | K)

States: START -> AWAITING_CHALLENGE -> PROOF_SENT -> AUTHENTICATED | FAILED

Reference:
- RFC 5054 §2.6
"""

from typing import Optional, Tuple, Union

from srp_pake.arithmetic.encoding import decode_public_value, pad
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
from srp_pake.groups.parameters import GroupParameters
from srp_pake.hashing.digest import Digest
from srp_pake.kdf.derivation import PasswordHasher, Secret, derive_private_key
from srp_pake.protocol.base import (
    RandomSource,
    SessionState,
    SrpSession,
    draw_private_scalar,
)


class ClientSession(SrpSession):
    """Client-side handshake state machine.

    Parameters
    ----------
    identity : str
        User identity I.
    password : Union[str, bytes]
        Password P. Dropped as soon as the challenge has been processed.
    group : Union[GroupParameters, str, int]
        Group parameters or catalog name. Must match the server's group.
    rng : Optional[RandomSource], optional
        Secure random source for the private exponent a.
    digest : Union[str, Digest, None], optional
        Hash primitive, must match the server's.
    hasher : Optional[PasswordHasher], optional
        Inner password hasher; must match the one used at registration.
    private_bits : int, optional
        Size of a in bits (at least 256).

    Raises
    ------
    InvalidGroup
        If ``group`` does not resolve to a group.

    Examples
    --------
    >>> client, A = ClientSession.start("alice", "correcthorse", "2048")
    >>> # send ("alice", A); receive (salt, B)
    >>> K, M1 = client.process_challenge(salt, B)  # doctest: +SKIP
    >>> # send M1; receive M2
    >>> key = client.verify_server_proof(M2)  # doctest: +SKIP
    """

    ROLE = "client"
    _SECRETS = ("_a", "_x", "_password", "_expected_m2")

    def __init__(
        self,
        identity: str,
        password: Secret,
        group: Union[GroupParameters, str, int],
        rng: Optional[RandomSource] = None,
        digest: Union[str, Digest, None] = None,
        hasher: Optional[PasswordHasher] = None,
        private_bits: int = DEFAULT_PRIVATE_BITS,
    ) -> None:
        super().__init__(group, digest, identity)
        self._password: Optional[Secret] = password
        self._hasher = hasher
        self._x: Optional[int] = None
        self._expected_m2: Optional[bytes] = None
        self._B: Optional[int] = None
        self._M1: Optional[bytes] = None

        self._a: Optional[int] = draw_private_scalar(private_bits, rng)
        self._A = pow_mod(self._group.g, self._a, self._group.N)
        self._set_state(SessionState.AWAITING_CHALLENGE)

    @classmethod
    def start(
        cls,
        identity: str,
        password: Secret,
        group: Union[GroupParameters, str, int],
        rng: Optional[RandomSource] = None,
        digest: Union[str, Digest, None] = None,
        hasher: Optional[PasswordHasher] = None,
        private_bits: int = DEFAULT_PRIVATE_BITS,
    ) -> Tuple["ClientSession", bytes]:
        """Create a session and return it with the public value A.

        Returns
        -------
        Tuple[ClientSession, bytes]
            The session (AWAITING_CHALLENGE) and A padded to len(N).
        """
        session = cls(
            identity,
            password,
            group,
            rng=rng,
            digest=digest,
            hasher=hasher,
            private_bits=private_bits,
        )
        return session, session.public_value

    @property
    def public_value(self) -> bytes:
        """Client public value A, padded to the byte length of N."""
        return pad(self._A, self._group)

    @property
    def client_proof(self) -> Optional[bytes]:
        """M1 once the challenge has been processed."""
        return self._M1

    def process_challenge(self, salt: bytes, B: Union[bytes, int]) -> Tuple[bytes, bytes]:
        """Consume the server challenge (s, B).

        Parameters
        ----------
        salt : bytes
            User salt sent by the server.
        B : Union[bytes, int]
            Server public value, padded to len(N).

        Returns
        -------
        Tuple[bytes, bytes]
            (K, M1). K is not confirmed until ``verify_server_proof``
            succeeds; send M1 to the server.

        Raises
        ------
        SessionStateError
            If the session is not AWAITING_CHALLENGE.
        InvalidPublicValue
            If B is malformed or congruent to zero modulo N.
        InvalidScramblingParameter
            If u = 0.
        """
        self._require(SessionState.AWAITING_CHALLENGE)
        with self._step():
            if not isinstance(salt, (bytes, bytearray)) or not salt:
                raise ValueError("Salt must be non-empty bytes")
            group = self._group
            B_int = decode_public_value(B, group)

            u = compute_u(self._A, B_int, group, self._digest)
            self._x = derive_private_key(
                self._identity,
                self._password,
                bytes(salt),
                digest=self._digest,
                hasher=self._hasher,
            )
            k = compute_k(group, self._digest)

            base = (B_int - k * pow_mod(group.g, self._x, group.N)) % group.N
            S = pow_mod(base, self._a + u * self._x, group.N)
            K = compute_session_key(S, group, self._digest)
            M1 = compute_client_proof(self._A, B_int, K, group, self._digest)

            self._expected_m2 = compute_server_proof(self._A, M1, K, group, self._digest)
            self._a = None
            self._x = None
            self._password = None

            self._B = B_int
            self._M1 = M1
            self._session_key = K
            self._set_state(SessionState.PROOF_SENT)
        return K, M1

    def verify_server_proof(self, M2: bytes) -> bytes:
        """Check the server proof M2 and finish the handshake.

        Parameters
        ----------
        M2 : bytes
            Server proof.

        Returns
        -------
        bytes
            The confirmed session key K.

        Raises
        ------
        SessionStateError
            If no client proof has been produced yet.
        ProofMismatch
            If M2 does not verify. The session is FAILED and its key
            discarded.
        """
        self._require(SessionState.PROOF_SENT)
        with self._step():
            if not isinstance(M2, (bytes, bytearray)) or len(M2) != self._digest.digest_size:
                raise ProofMismatch()
            if not constant_time_equal(bytes(M2), self._expected_m2):
                raise ProofMismatch()
            self._expected_m2 = None
            self._set_state(SessionState.AUTHENTICATED)
        return self._session_key
