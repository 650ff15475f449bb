"""SRP-6a handshake state machines.

Modules
-------
base
    Session base class, states and private scalar sampling.
client
    ClientSession: A -> (s, B) -> M1 -> M2.
server
    ServerSession: (I, A) -> (s, B) -> M1 -> M2.

Both sides are transport-agnostic: every call takes the peer's message as
bytes and returns the next message to send.

References
----------
- RFC 5054 §2.6
- T. Wu, "SRP-6: Improvements and Refinements to the Secure Remote
  Password Protocol" (2002)
"""

from srp_pake.protocol.base import (
    TERMINAL_STATES,
    RandomSource,
    SessionState,
    SrpSession,
    draw_private_scalar,
)
from srp_pake.protocol.client import ClientSession
from srp_pake.protocol.server import ServerSession

__all__ = [
    # Base
    "SessionState",
    "SrpSession",
    "RandomSource",
    "TERMINAL_STATES",
    "draw_private_scalar",
    # Roles
    "ClientSession",
    "ServerSession",
]
