"""Tests for issuing and verifying access tokens."""
import time
import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from openbank.errors import AuthenticationError, InvalidCredentialError
from openbank.services.tokens import TokenService

KEY = "unit-test-signing-key"


class TestIssue:
    """Tests for TokenService.issue."""

    def setup_method(self):
        self.service = TokenService(KEY, ttl_seconds=3600)

    def test_issue_binds_persona_and_random_item_id(self):
        """Issued claims name the persona and carry a UUID item_id."""
        issued = self.service.issue("steady")

        assert issued.claims.persona == "steady"
        assert uuid.UUID(issued.claims.item_id).version == 4

    def test_expiry_is_one_hour_after_issuance(self):
        """expires_at is exactly the TTL after issued_at."""
        now = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
        issued = self.service.issue("steady", now=now)

        assert issued.claims.issued_at == now
        assert issued.claims.expires_at == now + timedelta(hours=1)

    def test_reissuing_yields_independent_item_ids(self):
        """Every exchange gets a new item_id and a new token."""
        first = self.service.issue("steady")
        second = self.service.issue("steady")

        assert first.claims.item_id != second.claims.item_id
        assert first.access_token != second.access_token

    def test_token_is_hs256_jwt_with_expected_claims(self):
        """The encoded token is a standard JWT readable with the same key."""
        issued = self.service.issue("gig")

        payload = jwt.decode(issued.access_token, KEY, algorithms=["HS256"])
        assert payload["persona"] == "gig"
        assert payload["item_id"] == issued.claims.item_id
        assert payload["exp"] - payload["iat"] == 3600

    def test_issue_does_not_check_persona_existence(self):
        """Existence is the caller's concern."""
        issued = self.service.issue("nobody-knows-me")
        assert issued.claims.persona == "nobody-knows-me"

    def test_rejects_empty_signing_key(self):
        with pytest.raises(ValueError):
            TokenService("")

    def test_rejects_non_positive_ttl(self):
        with pytest.raises(ValueError):
            TokenService(KEY, ttl_seconds=0)


class TestVerify:
    """Tests for TokenService.verify."""

    def setup_method(self):
        self.service = TokenService(KEY, ttl_seconds=3600)

    def _signed(self, payload: dict, key: str = KEY, algorithm: str = "HS256") -> str:
        return jwt.encode(payload, key, algorithm=algorithm)

    def _valid_payload(self, **overrides) -> dict:
        now = int(time.time())
        payload = {"persona": "steady", "item_id": "item-1", "iat": now, "exp": now + 600}
        payload.update(overrides)
        return payload

    def test_roundtrip_returns_claims(self):
        """A freshly issued token verifies to the same claims."""
        issued = self.service.issue("steady")

        claims = self.service.verify(issued.access_token)

        assert claims.persona == "steady"
        assert claims.item_id == issued.claims.item_id
        assert claims.expires_at == issued.claims.expires_at

    def test_verify_is_deterministic(self):
        issued = self.service.issue("steady")
        assert self.service.verify(issued.access_token) == self.service.verify(issued.access_token)

    @pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c", "Bearer abc"])
    def test_malformed_tokens_rejected(self, token):
        with pytest.raises(InvalidCredentialError):
            self.service.verify(token)

    def test_expired_token_rejected(self):
        """A token issued two hours ago expired an hour ago."""
        issued = self.service.issue(
            "steady", now=datetime.now(timezone.utc) - timedelta(hours=2)
        )

        with pytest.raises(InvalidCredentialError) as exc_info:
            self.service.verify(issued.access_token)
        assert exc_info.value.detail == "expired"

    def test_token_signed_with_other_key_rejected(self):
        forged = self._signed(self._valid_payload(), key="attacker-key")

        with pytest.raises(InvalidCredentialError) as exc_info:
            self.service.verify(forged)
        assert exc_info.value.detail == "bad_signature"

    def test_token_from_service_with_distinct_key_rejected(self):
        """Services constructed with different keys do not trust each other."""
        other = TokenService("another-unit-test-key")
        issued = other.issue("steady")

        with pytest.raises(InvalidCredentialError):
            self.service.verify(issued.access_token)

    def test_unsigned_token_rejected(self):
        """alg=none tokens are never accepted."""
        unsigned = jwt.encode(self._valid_payload(), None, algorithm="none")

        with pytest.raises(InvalidCredentialError):
            self.service.verify(unsigned)

    def test_tampered_payload_rejected(self):
        """Swapping the payload segment breaks the signature."""
        genuine = self.service.issue("steady").access_token
        other = self.service.issue("gig").access_token
        header, _, signature = genuine.split(".")
        _, other_payload, _ = other.split(".")

        with pytest.raises(InvalidCredentialError):
            self.service.verify(f"{header}.{other_payload}.{signature}")

    def test_missing_expiry_rejected(self):
        payload = self._valid_payload()
        del payload["exp"]

        with pytest.raises(InvalidCredentialError):
            self.service.verify(self._signed(payload))

    @pytest.mark.parametrize("field", ["persona", "item_id"])
    def test_missing_identity_claims_rejected(self, field):
        payload = self._valid_payload()
        del payload[field]

        with pytest.raises(InvalidCredentialError) as exc_info:
            self.service.verify(self._signed(payload))
        assert exc_info.value.detail == "bad_claims"

    def test_non_string_persona_rejected(self):
        with pytest.raises(InvalidCredentialError):
            self.service.verify(self._signed(self._valid_payload(persona=42)))

    def test_all_failures_share_one_client_message(self):
        """Whatever the cause, the error presented to clients is the same."""
        messages = set()
        for token in ["", "garbage", self._signed(self._valid_payload(), key="x" * 32)]:
            with pytest.raises(AuthenticationError) as exc_info:
                self.service.verify(token)
            messages.add((exc_info.value.status_code, exc_info.value.message))

        assert messages == {(401, "unauthorized")}
