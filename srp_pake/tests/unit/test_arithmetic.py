"""Unit tests for fixed-width encoding and SRP-6a derived values.

Tests for:
- Integer/byte encoding and padding to len(N)
- Public value decoding and range checks
- k, u, K, M1, M2 derivations
- Constant-time comparison
"""

import hashlib

import pytest

from srp_pake.arithmetic import (
    byte_length,
    bytes_to_int,
    compute_client_proof,
    compute_k,
    compute_server_proof,
    compute_session_key,
    compute_u,
    constant_time_equal,
    decode_public_value,
    int_to_bytes,
    pad,
    pow_mod,
)
from srp_pake.core.exceptions import InvalidPublicValue, InvalidScramblingParameter
from srp_pake.hashing import Digest


# =============================================================================
# Encoding Tests
# =============================================================================


class TestEncoding:
    """Tests for big-endian encoding helpers."""

    def test_byte_length(self):
        """Test minimal byte lengths."""
        assert byte_length(0) == 1
        assert byte_length(255) == 1
        assert byte_length(256) == 2
        assert byte_length(2**1024 - 1) == 128

    def test_byte_length_negative(self):
        """Test negative integers have no byte length."""
        with pytest.raises(ValueError):
            byte_length(-1)

    def test_int_to_bytes_pads_left(self):
        """Test values are left-padded with zero bytes."""
        assert int_to_bytes(1, 4) == b"\x00\x00\x00\x01"
        assert bytes_to_int(b"\x00\x00\x00\x01") == 1

    def test_int_to_bytes_overflow(self):
        """Test values wider than the target length are rejected."""
        with pytest.raises(ValueError):
            int_to_bytes(256, 1)
        with pytest.raises(ValueError):
            int_to_bytes(-5, 8)

    def test_pad_width_matches_group(self, fast_group):
        """Test pad always produces len(N) bytes."""
        assert len(pad(2, fast_group)) == 128
        assert len(pad(fast_group.N - 1, fast_group)) == 128

    @pytest.mark.parametrize("offset", [1, 2, 255, 2**64 + 7, 2**1000 + 3])
    def test_round_trip_across_range(self, fast_group, offset):
        """Test decode(pad(v)) == v for small and large values below N."""
        for value in (offset, fast_group.N - offset):
            assert bytes_to_int(pad(value, fast_group)) == value
            assert decode_public_value(pad(value, fast_group), fast_group) == value


# =============================================================================
# Public Value Decoding Tests
# =============================================================================


class TestDecodePublicValue:
    """Tests for decode_public_value."""

    def test_accepts_int(self, fast_group):
        """Test already decoded integers are range checked and returned."""
        assert decode_public_value(12345, fast_group) == 12345

    def test_rejects_zero(self, fast_group):
        """Test zero is rejected."""
        with pytest.raises(InvalidPublicValue):
            decode_public_value(bytes(fast_group.byte_length), fast_group)
        with pytest.raises(InvalidPublicValue):
            decode_public_value(0, fast_group)

    def test_rejects_modulus_and_above(self, fast_group):
        """Test N and larger multiples are rejected as out of range."""
        with pytest.raises(InvalidPublicValue):
            decode_public_value(pad(fast_group.N, fast_group), fast_group)
        with pytest.raises(InvalidPublicValue):
            decode_public_value(2 * fast_group.N, fast_group)

    def test_rejects_wrong_length(self, fast_group):
        """Test unpadded or oversized encodings are rejected."""
        with pytest.raises(InvalidPublicValue, match="bytes"):
            decode_public_value(b"\x05", fast_group)
        with pytest.raises(InvalidPublicValue):
            decode_public_value(b"\x00" + pad(5, fast_group), fast_group)

    def test_rejects_other_types(self, fast_group):
        """Test strings, floats and bools are rejected."""
        for value in ("05", 5.0, True):
            with pytest.raises(InvalidPublicValue):
                decode_public_value(value, fast_group)

    def test_rejects_negative(self, fast_group):
        """Test negative integers are rejected."""
        with pytest.raises(InvalidPublicValue):
            decode_public_value(-1, fast_group)


# =============================================================================
# Derived Value Tests
# =============================================================================


class TestDerivedValues:
    """Tests for k, u, K, M1 and M2."""

    @pytest.fixture
    def digest(self):
        return Digest("sha256")

    def test_pow_mod(self):
        """Test modular exponentiation and argument checks."""
        assert pow_mod(4, 13, 497) == 445
        with pytest.raises(ValueError):
            pow_mod(2, 3, 1)
        with pytest.raises(ValueError):
            pow_mod(2, -1, 7)

    def test_k_uses_padded_generator(self, fast_group, digest):
        """Test k = H(PAD(N) | PAD(g))."""
        expected = hashlib.sha256(
            fast_group.N.to_bytes(128, "big") + fast_group.g.to_bytes(128, "big")
        ).digest()
        assert compute_k(fast_group, digest) == int.from_bytes(expected, "big")

    def test_k_for_rfc5054_1024_sha1(self, fast_group):
        """Test k against the RFC 5054 Appendix B value."""
        assert compute_k(fast_group, Digest("sha1")) == 0x7556AA045AEF2CDD07ABAF0F665C3E818913186F

    def test_u_is_order_sensitive(self, fast_group, digest):
        """Test u(A, B) differs from u(B, A)."""
        assert compute_u(3, 5, fast_group, digest) != compute_u(5, 3, fast_group, digest)

    def test_u_zero_rejected(self, fast_group):
        """Test a zero scrambling parameter raises."""

        class ZeroDigest(Digest):
            def hash_to_int(self, *parts):
                return 0

        with pytest.raises(InvalidScramblingParameter):
            compute_u(3, 5, fast_group, ZeroDigest("sha256"))

    def test_session_key_length(self, fast_group, digest):
        """Test K has the digest width."""
        assert len(compute_session_key(12345, fast_group, digest)) == 32

    def test_proofs_bind_inputs(self, fast_group, digest):
        """Test M1 and M2 change when any input changes."""
        K = compute_session_key(99, fast_group, digest)
        m1 = compute_client_proof(3, 5, K, fast_group, digest)
        assert m1 != compute_client_proof(3, 6, K, fast_group, digest)
        assert m1 != compute_client_proof(4, 5, K, fast_group, digest)
        m2 = compute_server_proof(3, m1, K, fast_group, digest)
        assert m2 != m1
        assert m2 != compute_server_proof(4, m1, K, fast_group, digest)

    def test_client_proof_layout(self, fast_group, digest):
        """Test M1 = H(PAD(A) | PAD(B) | K)."""
        K = b"k" * 32
        expected = hashlib.sha256(pad(3, fast_group) + pad(5, fast_group) + K).digest()
        assert compute_client_proof(3, 5, K, fast_group, digest) == expected

    def test_constant_time_equal(self):
        """Test comparison results."""
        assert constant_time_equal(b"abc", b"abc")
        assert not constant_time_equal(b"abc", b"abd")
        assert not constant_time_equal(b"abc", b"ab")
