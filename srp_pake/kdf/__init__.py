"""Key derivation and user records.

Modules
-------
derivation
    Private key x, verifier v and salts; pluggable password hashers.
records
    UserRecord, identity stores and decoy records.

Classes
-------
PasswordHasher
    Strategy for the inner password hash.
Rfc5054PasswordHasher
    Default H(I | ":" | P) inner hash.
ScryptPasswordHasher
    Memory-hard inner hash.
UserRecord
    (identity, salt, verifier) as persisted by the server.
IdentityStore, InMemoryIdentityStore
    Identity lookup collaborator.

References
----------
- RFC 5054 §2.4
"""

from srp_pake.kdf.derivation import (
    PasswordHasher,
    Rfc5054PasswordHasher,
    ScryptPasswordHasher,
    derive_private_key,
    derive_verifier,
    generate_salt,
)
from srp_pake.kdf.records import (
    IdentityStore,
    InMemoryIdentityStore,
    UserRecord,
    create_user_record,
    make_decoy_record,
)

__all__ = [
    # Derivation
    "PasswordHasher",
    "Rfc5054PasswordHasher",
    "ScryptPasswordHasher",
    "derive_private_key",
    "derive_verifier",
    "generate_salt",
    # Records
    "UserRecord",
    "IdentityStore",
    "InMemoryIdentityStore",
    "create_user_record",
    "make_decoy_record",
]
