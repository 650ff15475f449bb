"""User records and the identity store interface.

The server side of the handshake needs (salt, verifier) for the identity the
client claims. Persistence is the caller's concern; this module defines the
record type, an abstract store and a dictionary-backed implementation.

Unknown identities
------------------
Answering "no such user" before the handshake leaks account existence. A
store can instead return a decoy record from ``make_decoy_record``: a
deterministic salt and a verifier in the right group that no password
matches. The handshake then fails at proof verification exactly like a
wrong password.
"""

import abc
import hmac
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Union

from srp_pake.arithmetic.encoding import bytes_to_int, int_to_bytes
from srp_pake.core.constants import DECOY_LABEL, DEFAULT_SALT_BYTES
from srp_pake.groups.parameters import GroupParameters
from srp_pake.hashing.digest import Digest, get_digest
from srp_pake.kdf.derivation import (
    PasswordHasher,
    Secret,
    derive_private_key,
    derive_verifier,
    generate_salt,
    to_bytes,
)


@dataclass(frozen=True)
class UserRecord:
    """What the server persists per user.

    Attributes
    ----------
    identity : str
        User identity I.
    salt : bytes
        Per-user salt s.
    verifier : int
        Password verifier v = g^x mod N.
    """

    identity: str
    salt: bytes
    verifier: int

    def __repr__(self) -> str:
        return f"UserRecord(identity={self.identity!r}, salt={self.salt.hex()})"

    def verifier_bytes(self, group: GroupParameters) -> bytes:
        """Verifier padded to the byte length of N, for storage."""
        return int_to_bytes(self.verifier, group.byte_length)

    @classmethod
    def from_bytes(cls, identity: str, salt: bytes, verifier: bytes) -> "UserRecord":
        """Rebuild a record from its stored byte form."""
        return cls(identity=identity, salt=bytes(salt), verifier=bytes_to_int(verifier))


def create_user_record(
    identity: str,
    password: Secret,
    group: GroupParameters,
    digest: Union[str, Digest, None] = None,
    salt: Optional[bytes] = None,
    hasher: Optional[PasswordHasher] = None,
    rng: Optional[Callable[[int], bytes]] = None,
    salt_bytes: int = DEFAULT_SALT_BYTES,
) -> UserRecord:
    """Registration helper: produce (salt, verifier) for a new user.

    Parameters
    ----------
    identity : str
        User identity.
    password : Union[str, bytes]
        Cleartext password; not retained.
    group : GroupParameters
        Group the verifier lives in.
    digest : Union[str, Digest, None], optional
        Hash used for x.
    salt : Optional[bytes], optional
        Fixed salt; a fresh random one is generated when omitted.
    hasher : Optional[PasswordHasher], optional
        Inner password hasher.
    rng : Optional[Callable[[int], bytes]], optional
        Random source for the salt.
    salt_bytes : int, optional
        Length of a generated salt.

    Returns
    -------
    UserRecord
        Record to hand to the identity store.
    """
    if salt is None:
        salt = generate_salt(salt_bytes, rng)
    x = derive_private_key(identity, password, salt, digest=digest, hasher=hasher)
    return UserRecord(identity=identity, salt=bytes(salt), verifier=derive_verifier(x, group))


def make_decoy_record(
    identity: str,
    group: GroupParameters,
    secret: bytes,
    digest: Union[str, Digest, None] = None,
    salt_bytes: int = DEFAULT_SALT_BYTES,
) -> UserRecord:
    """Build a plausible but unusable record for an unknown identity.

    Parameters
    ----------
    identity : str
        Identity that has no record.
    group : GroupParameters
        Group the fake verifier should live in.
    secret : bytes
        Server-side secret; keeps decoys unpredictable to clients.
    digest : Union[str, Digest, None], optional
        HMAC hash.
    salt_bytes : int, optional
        Length of the fake salt.

    Returns
    -------
    UserRecord
        Deterministic for a given (identity, secret).
    """
    if not secret:
        raise ValueError("Decoy secret cannot be empty")
    name = get_digest(digest).name
    ident = to_bytes(identity)

    salt = b""
    counter = 0
    while len(salt) < salt_bytes:
        salt += hmac.new(
            secret, DECOY_LABEL + b"|salt|" + bytes([counter]) + ident, name
        ).digest()
        counter += 1

    x = bytes_to_int(hmac.new(secret, DECOY_LABEL + b"|x|" + ident, name).digest())
    return UserRecord(
        identity=identity, salt=salt[:salt_bytes], verifier=derive_verifier(x, group)
    )


class IdentityStore(abc.ABC):
    """Maps identities to user records."""

    @abc.abstractmethod
    def lookup(self, identity: str) -> Optional[UserRecord]:
        """Return the record for ``identity`` or None."""
        raise NotImplementedError

    @abc.abstractmethod
    def register(self, record: UserRecord) -> None:
        """Store ``record``, replacing any previous one for the identity."""
        raise NotImplementedError


class InMemoryIdentityStore(IdentityStore):
    """Dictionary-backed identity store.

    Parameters
    ----------
    decoy_secret : Optional[bytes], optional
        When set, ``lookup_or_decoy`` answers unknown identities with a
        decoy record instead of None.
    salt_bytes : int, optional
        Salt length of decoy records. Match the length used when
        registering real records so decoys cannot be told apart.
    """

    def __init__(
        self, decoy_secret: Optional[bytes] = None, salt_bytes: int = DEFAULT_SALT_BYTES
    ) -> None:
        self._records: Dict[str, UserRecord] = {}
        self._decoy_secret = decoy_secret
        self._salt_bytes = salt_bytes

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, identity: object) -> bool:
        return identity in self._records

    def lookup(self, identity: str) -> Optional[UserRecord]:
        return self._records.get(identity)

    def register(self, record: UserRecord) -> None:
        self._records[record.identity] = record

    def lookup_or_decoy(
        self,
        identity: str,
        group: GroupParameters,
        digest: Union[str, Digest, None] = None,
    ) -> Optional[UserRecord]:
        """Like ``lookup`` but falls back to a decoy when configured."""
        record = self.lookup(identity)
        if record is None and self._decoy_secret:
            record = make_decoy_record(
                identity, group, self._decoy_secret, digest, salt_bytes=self._salt_bytes
            )
        return record
