"""
Tests for token issuance and verification.
"""

from datetime import timedelta

import jwt
import pytest

from conftest import PHONE, T0, TEST_SECRET


class TestTokenIssuer:
    """Tests for TokenIssuer."""

    def test_issue_claims(self, issuer):
        """Token binds subject, iat and exp one hour apart."""
        token = issuer.issue(PHONE, T0)

        payload = jwt.decode(
            token.token,
            TEST_SECRET,
            algorithms=["HS256"],
            options={"verify_exp": False, "verify_iat": False},
        )

        assert payload["sub"] == PHONE
        assert payload["iat"] == int(T0.timestamp())
        assert payload["exp"] == int(T0.timestamp()) + 3600
        assert token.subject == PHONE
        assert token.issued_at == T0
        assert token.expires_at == T0 + timedelta(hours=1)
        assert token.token_type == "bearer"

    def test_issuer_claim(self, secret):
        """iss is set when configured."""
        from smsly_auth.config import AuthConfig
        from smsly_auth.tokens import TokenIssuer

        token = TokenIssuer(secret, AuthConfig(jwt_issuer="smsly")).issue(PHONE, T0)
        header_and_claims = jwt.decode(
            token.token,
            TEST_SECRET,
            algorithms=["HS256"],
            options={"verify_exp": False, "verify_iat": False},
        )

        assert header_and_claims["iss"] == "smsly"

    def test_issue_without_secret(self, config):
        """Empty secret store is a fatal condition."""
        from smsly_auth.exceptions import SecretUnavailable
        from smsly_auth.secret_store import SecretStore
        from smsly_auth.tokens import TokenIssuer

        with pytest.raises(SecretUnavailable):
            TokenIssuer(SecretStore(None), config).issue(PHONE, T0)

    def test_token_not_in_repr(self, issuer):
        """Serialized token should not appear in repr."""
        token = issuer.issue(PHONE, T0)

        assert token.token not in repr(token)


class TestTokenVerifier:
    """Tests for TokenVerifier."""

    def test_verify_valid_token(self, issuer, verifier):
        """Should return the bound subject."""
        token = issuer.issue(PHONE, T0)

        assert verifier.verify(token.token, T0 + timedelta(minutes=30)) == PHONE

    def test_verify_missing_token(self, verifier):
        """Absent token is Unauthenticated."""
        from smsly_auth.exceptions import Unauthenticated

        with pytest.raises(Unauthenticated):
            verifier.verify(None)
        with pytest.raises(Unauthenticated):
            verifier.verify("   ")

    def test_verify_expired_token(self, issuer, verifier):
        """Token is rejected at and after exp."""
        from smsly_auth.exceptions import InvalidCredential

        token = issuer.issue(PHONE, T0)

        assert verifier.verify(token.token, T0 + timedelta(minutes=59, seconds=59)) == PHONE
        with pytest.raises(InvalidCredential):
            verifier.verify(token.token, T0 + timedelta(hours=1))
        with pytest.raises(InvalidCredential):
            verifier.verify(token.token, T0 + timedelta(hours=2))

    def test_verify_wrong_secret(self, verifier):
        """Token signed with another secret is rejected."""
        from smsly_auth.exceptions import InvalidCredential

        forged = jwt.encode(
            {"sub": PHONE, "iat": int(T0.timestamp()), "exp": int(T0.timestamp()) + 3600},
            "some-other-secret-with-enough-length",
            algorithm="HS256",
        )

        with pytest.raises(InvalidCredential):
            verifier.verify(forged, T0)

    def test_verify_tampered_claims(self, issuer, verifier):
        """Swapping the payload invalidates the signature."""
        from smsly_auth.exceptions import InvalidCredential

        header, _, signature = issuer.issue(PHONE, T0).token.split(".")
        _, other_payload, _ = issuer.issue("+15550000000", T0).token.split(".")
        tampered = f"{header}.{other_payload}.{signature}"

        with pytest.raises(InvalidCredential):
            verifier.verify(tampered, T0)

    def test_verify_malformed(self, verifier):
        """Garbage is InvalidCredential, not a crash."""
        from smsly_auth.exceptions import InvalidCredential

        for garbage in ("not-a-jwt", "a.b.c", "Bearer"):
            with pytest.raises(InvalidCredential):
                verifier.verify(garbage, T0)

    def test_verify_rejects_alg_none(self, verifier):
        """Unsigned tokens are never accepted."""
        from smsly_auth.exceptions import InvalidCredential

        unsigned = jwt.encode(
            {"sub": PHONE, "iat": int(T0.timestamp()), "exp": int(T0.timestamp()) + 3600},
            None,
            algorithm="none",
        )

        with pytest.raises(InvalidCredential):
            verifier.verify(unsigned, T0)

    def test_verify_missing_exp(self, verifier):
        """exp is a required claim."""
        from smsly_auth.exceptions import InvalidCredential

        token = jwt.encode({"sub": PHONE, "iat": int(T0.timestamp())}, TEST_SECRET, algorithm="HS256")

        with pytest.raises(InvalidCredential):
            verifier.verify(token, T0)

    def test_verify_issuer_mismatch(self, secret):
        """Configured issuer must match."""
        from smsly_auth.config import AuthConfig
        from smsly_auth.exceptions import InvalidCredential
        from smsly_auth.tokens import TokenIssuer, TokenVerifier

        token = TokenIssuer(secret, AuthConfig(jwt_issuer="other")).issue(PHONE, T0)
        verifier = TokenVerifier(secret, AuthConfig(jwt_issuer="smsly"))

        with pytest.raises(InvalidCredential):
            verifier.verify(token.token, T0)
