"""Unit tests for password hashing."""

from sce_archive.kernel.identity.password import (
    PasswordHasher,
    hash_password,
    verify_password,
)


class TestPasswordHasher:
    """Tests for PasswordHasher."""

    def test_hash_creates_different_hashes(self, hasher: PasswordHasher):
        """Same password should create different hashes (due to salt)."""
        password = "TestPassword123"
        hash1 = hasher.hash(password)
        hash2 = hasher.hash(password)

        assert hash1 != hash2
        assert hash1.startswith("$2b$")  # bcrypt prefix
        assert password not in hash1

    def test_verify_correct_password(self, hasher: PasswordHasher):
        hashed = hasher.hash("TestPassword123")
        assert hasher.verify("TestPassword123", hashed) is True

    def test_verify_wrong_password(self, hasher: PasswordHasher):
        hashed = hasher.hash("TestPassword123")
        assert hasher.verify("WrongPassword", hashed) is False

    def test_malformed_hash_does_not_verify(self, hasher: PasswordHasher):
        assert hasher.verify("anything", "not-a-bcrypt-hash") is False

    def test_needs_rehash_on_cost_change(self, hasher: PasswordHasher):
        hashed = hasher.hash("TestPassword123")
        assert hasher.needs_rehash(hashed) is False
        assert PasswordHasher(rounds=5).needs_rehash(hashed) is True
        assert hasher.needs_rehash("garbage") is True

    def test_convenience_functions(self):
        hashed = hash_password("TestPassword123")

        assert verify_password("TestPassword123", hashed) is True
        assert verify_password("wrong", hashed) is False
