"""SRP-6a password-authenticated key exchange.

Usage:
    from srp_pake import ClientSession, ServerSession, create_user_record, lookup

    group = lookup("2048")
    record = create_user_record("alice", "correcthorse", group)

    client, A = ClientSession.start("alice", "correcthorse", group)
    server, salt, B = ServerSession.start(record, group, A)
    K, M1 = client.process_challenge(salt, B)
    M2, _ = server.verify_client_proof(M1)
    key = client.verify_server_proof(M2)
"""

from srp_pake.core.exceptions import (
    GroupError,
    InvalidGroup,
    InvalidPublicValue,
    InvalidScramblingParameter,
    ProofMismatch,
    SessionStateError,
    SrpError,
)
from srp_pake.groups import GroupParameters, available_groups, custom_group, lookup
from srp_pake.hashing import Digest, get_digest
from srp_pake.kdf import (
    InMemoryIdentityStore,
    ScryptPasswordHasher,
    UserRecord,
    create_user_record,
)
from srp_pake.protocol import ClientSession, ServerSession, SessionState

__version__ = "0.1.0"

__all__ = [
    # Sessions
    "ClientSession",
    "ServerSession",
    "SessionState",
    # Groups and digests
    "GroupParameters",
    "available_groups",
    "custom_group",
    "lookup",
    "Digest",
    "get_digest",
    # Registration
    "UserRecord",
    "InMemoryIdentityStore",
    "ScryptPasswordHasher",
    "create_user_record",
    # Errors
    "SrpError",
    "InvalidGroup",
    "GroupError",
    "InvalidPublicValue",
    "InvalidScramblingParameter",
    "ProofMismatch",
    "SessionStateError",
]
