"""Protocol constants.

Reference:
- RFC 5054 §2.5 (SRP-6a message flow), Appendix A (group parameters)
- RFC 2945 §3 (verifier and private key derivation)
"""

# Ephemeral key material
MIN_PRIVATE_BITS: int = 256  # Lower bound for a and b
DEFAULT_PRIVATE_BITS: int = 256

# Registration
DEFAULT_SALT_BYTES: int = 16
MIN_SALT_BYTES: int = 8

# Group parameters
DEFAULT_GROUP: str = "2048"
MIN_MODULUS_BITS: int = 1024  # Smallest group accepted from callers

# Digest
DEFAULT_DIGEST: str = "sha256"

# Separator between identity and password in the inner hash
IDENTITY_SEPARATOR: bytes = b":"

# Scrypt defaults for the memory-hard password hasher
SCRYPT_N: int = 2**14
SCRYPT_R: int = 8
SCRYPT_P: int = 1
SCRYPT_LENGTH: int = 32

# Decoy records for unknown identities
DECOY_LABEL: bytes = b"srp-decoy-record"
