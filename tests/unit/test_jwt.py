"""Unit tests for JWT token management."""

import uuid
from datetime import timedelta

from sce_archive.kernel.identity.jwt import JWTManager


class TestJWTManager:
    """Tests for JWTManager."""

    def test_access_token_round_trip(self, jwt_manager: JWTManager):
        account_id = uuid.uuid4()
        token, expires, jti = jwt_manager.create_access_token(account_id, "director", "admin")

        payload = jwt_manager.verify_access_token(token)
        assert payload is not None
        assert payload.sub == str(account_id)
        assert payload.username == "director"
        assert payload.role == "admin"
        assert payload.jti == jti
        assert payload.exp > payload.iat

    def test_token_types_are_not_interchangeable(self, jwt_manager: JWTManager):
        account_id = uuid.uuid4()
        access, _, _ = jwt_manager.create_access_token(account_id, "reader", "reader")
        refresh, _, _ = jwt_manager.create_refresh_token(account_id)
        verify = jwt_manager.create_email_verification_token(account_id, "reader@scefoundation.org")

        assert jwt_manager.verify_refresh_token(access) is None
        assert jwt_manager.verify_email_verification_token(refresh) is None
        assert jwt_manager.verify_access_token(verify) is None
        payload = jwt_manager.verify_email_verification_token(verify)
        assert payload.sub == str(account_id)
        assert payload.email == "reader@scefoundation.org"

    def test_expired_token_rejected(self, jwt_manager: JWTManager):
        token, _, _ = jwt_manager.create_access_token(
            uuid.uuid4(), "reader", "reader", expires_delta=timedelta(seconds=-10)
        )
        assert jwt_manager.verify_access_token(token) is None

    def test_foreign_signature_rejected(self, jwt_manager: JWTManager):
        other = JWTManager(secret_key="another-secret-key-entirely-different")
        token, _, _ = other.create_access_token(uuid.uuid4(), "reader", "reader")
        assert jwt_manager.verify_access_token(token) is None

    def test_garbage_rejected(self, jwt_manager: JWTManager):
        assert jwt_manager.verify_access_token("not.a.token") is None

    def test_token_pair(self, jwt_manager: JWTManager):
        pair, refresh_exp = jwt_manager.create_token_pair(uuid.uuid4(), "reader", "reader")

        assert pair.token_type == "bearer"
        assert 0 < pair.expires_in <= 30 * 60
        assert jwt_manager.verify_refresh_token(pair.refresh_token).exp == refresh_exp.replace(microsecond=0)

    def test_hash_token_is_stable(self):
        assert JWTManager.hash_token("abc") == JWTManager.hash_token("abc")
        assert JWTManager.hash_token("abc") != JWTManager.hash_token("abd")
