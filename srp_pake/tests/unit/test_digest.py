"""Unit tests for the digest strategy."""

import hashlib

import pytest

from srp_pake.hashing import SUPPORTED_DIGESTS, Digest, get_digest


class TestDigest:
    """Tests for Digest reset/update/finalize semantics."""

    def test_incremental_matches_hashlib(self):
        """Test update/finalize produces the hashlib digest."""
        d = Digest("sha256")
        d.update(b"hello ")
        d.update(b"world")
        assert d.finalize() == hashlib.sha256(b"hello world").digest()

    def test_finalize_resets_state(self):
        """Test the instance can be reused after finalize."""
        d = Digest("sha1")
        d.update(b"first")
        d.finalize()
        d.update(b"abc")
        assert d.finalize() == hashlib.sha1(b"abc").digest()

    def test_reset_discards_input(self):
        """Test reset drops data fed so far."""
        d = Digest("sha512")
        d.update(b"garbage")
        d.reset()
        assert d.finalize() == hashlib.sha512(b"").digest()

    def test_one_shot_hash(self):
        """Test hash() concatenates its parts."""
        d = Digest("sha384")
        assert d.hash(b"a", b"b", b"c") == hashlib.sha384(b"abc").digest()
        assert d.hash_to_int(b"\x00\x01") == int.from_bytes(hashlib.sha384(b"\x00\x01").digest(), "big")

    def test_rejects_non_bytes(self):
        """Test integers and strings must be encoded by the caller."""
        d = Digest("sha256")
        with pytest.raises(TypeError):
            d.update(5)
        with pytest.raises(TypeError):
            d.hash(b"ok", "not bytes")

    @pytest.mark.parametrize("name", SUPPORTED_DIGESTS)
    def test_digest_sizes(self, name):
        """Test digest_size matches the finalized output."""
        d = Digest(name)
        assert len(d.finalize()) == d.digest_size

    def test_name_normalization(self):
        """Test common spellings resolve to hashlib names."""
        assert Digest("SHA-256").name == "sha256"
        assert Digest("sha3-256").name == "sha3_256"

    def test_unsupported(self):
        """Test unknown algorithms raise ValueError."""
        with pytest.raises(ValueError):
            Digest("md5")


class TestGetDigest:
    """Tests for get_digest."""

    def test_default_is_sha256(self):
        assert get_digest().name == "sha256"

    def test_returns_fresh_instance(self):
        """Test a Digest argument is copied, not shared."""
        original = Digest("sha1")
        original.update(b"partial")
        copy = get_digest(original)
        assert copy == original
        assert copy is not original
        assert copy.finalize() == hashlib.sha1(b"").digest()
