"""Number theory and encoding primitives shared by both handshake sides.

Modules
-------
encoding
    Fixed-width big-endian encoding and public value decoding.
modular
    pow_mod and the SRP-6a derived values k, u, K, M1, M2.
"""

from srp_pake.arithmetic.encoding import (
    byte_length,
    bytes_to_int,
    decode_public_value,
    int_to_bytes,
    pad,
)
from srp_pake.arithmetic.modular import (
    compute_client_proof,
    compute_k,
    compute_server_proof,
    compute_session_key,
    compute_u,
    constant_time_equal,
    pow_mod,
)

__all__ = [
    # Encoding
    "byte_length",
    "int_to_bytes",
    "bytes_to_int",
    "pad",
    "decode_public_value",
    # Arithmetic
    "pow_mod",
    "compute_k",
    "compute_u",
    "compute_session_key",
    "compute_client_proof",
    "compute_server_proof",
    "constant_time_equal",
]
