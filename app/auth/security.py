"""Session token issuance and validation.

Tokens are compact HS256 JWTs produced and consumed with ``python-jose``.
The service is stateless: the signed token is the only carrier of session
state, so there is nothing to look up per request and nothing to lock.

Decoding happens in two stages:

* ``_decode`` verifies the signature and the algorithm family and turns the
  payload into :class:`SessionClaims`. It never looks at the clock.
* ``_check_timing`` applies the ``exp`` / ``nbf`` / ``iat`` rules.

``validate_token`` runs both stages. The inspection helpers
(``is_token_expired``, ``get_token_expiration``) run only the first one so
they keep working on tokens whose validity period has lapsed.

Token revocation
~~~~~~~~~~~~~~~~
Every token carries a unique ``jti`` but nothing here records it, so a token
stays usable until it expires. Per-token revocation would need a deny-list
keyed on ``jti`` consulted by the authentication dependency.
"""

import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import jwt
from jose.exceptions import JOSEError
from jose.utils import base64url_decode, base64url_encode

from app.auth.exceptions import (
    NoExpirationClaimError,
    SignatureInvalidError,
    SigningError,
    TokenExpiredError,
    TokenIssuedInFutureError,
    TokenNotYetValidError,
)
from app.constants import TOKEN_ISSUER

SIGNING_ALGORITHM = "HS256"
# Any HMAC variant is accepted on the way in; tokens are always minted with HS256.
HMAC_ALGORITHMS = ["HS256", "HS384", "HS512"]

# Signature only. Timing claims are checked by ``_check_timing`` so the
# inspection helpers can read lapsed tokens.
_DECODE_OPTIONS = {
    "verify_signature": True,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iat": False,
    "verify_aud": False,
    "verify_iss": False,
}


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _check_signature_encoding(token: str) -> None:
    """Reject a signature segment whose base64url form is not canonical.

    The last character of an HS256 signature carries two unused bits that a
    lenient decoder ignores, so several spellings map to the same bytes.
    """
    segment = token.rpartition(".")[2].encode("ascii")
    if base64url_encode(base64url_decode(segment)) != segment:
        raise ValueError("Non-canonical signature encoding")


def _to_timestamp(value: datetime | None) -> int | None:
    return int(value.timestamp()) if value is not None else None


def _from_timestamp(payload: Mapping[str, Any], name: str) -> datetime | None:
    raw = payload.get(name)
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, int | float):
        raise SignatureInvalidError(f"Malformed '{name}' claim")
    try:
        return datetime.fromtimestamp(int(raw), tz=UTC)
    except (OverflowError, OSError, ValueError) as exc:
        raise SignatureInvalidError(f"Malformed '{name}' claim") from exc


@dataclass(frozen=True)
class SessionClaims:
    """Identity and validity window carried by a session token."""

    user_id: str
    username: str
    email: str
    issued_at: datetime | None = None
    not_before: datetime | None = None
    expires_at: datetime | None = None
    token_id: str = ""
    issuer: str = TOKEN_ISSUER

    def to_payload(self) -> dict[str, Any]:
        """Serialise to JWT claim names, omitting absent timestamps."""
        payload: dict[str, Any] = {
            "user_id": self.user_id,
            "username": self.username,
            "email": self.email,
            "iss": self.issuer,
            "jti": self.token_id,
        }
        for name, value in (
            ("iat", self.issued_at),
            ("nbf", self.not_before),
            ("exp", self.expires_at),
        ):
            timestamp = _to_timestamp(value)
            if timestamp is not None:
                payload[name] = timestamp
        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SessionClaims":
        """Build claims from a decoded JWT payload."""
        return cls(
            user_id=str(payload.get("user_id", "")),
            username=str(payload.get("username", "")),
            email=str(payload.get("email", "")),
            issued_at=_from_timestamp(payload, "iat"),
            not_before=_from_timestamp(payload, "nbf"),
            expires_at=_from_timestamp(payload, "exp"),
            token_id=str(payload.get("jti", "")),
            issuer=str(payload.get("iss", "")),
        )


class TokenService:
    """Mint and verify bearer session tokens with a shared HMAC secret."""

    def __init__(
        self,
        secret_key: str,
        token_duration: timedelta,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._secret_key = secret_key
        self._token_duration = token_duration
        self._clock = clock

    @property
    def token_duration(self) -> timedelta:
        return self._token_duration

    # ------------------------------------------------------------------
    # Issuance
    # ------------------------------------------------------------------

    def generate_token(self, user_id: str, username: str, email: str) -> str:
        """Issue a token for the given identity, valid from now for ``token_duration``."""
        return self._sign(self._new_claims(user_id, username, email))

    def refresh_token(self, claims: SessionClaims) -> str:
        """Reissue *claims* with a fresh validity window and a new ``jti``.

        The caller is expected to have validated the token *claims* came from.
        """
        return self._sign(self._new_claims(claims.user_id, claims.username, claims.email))

    def _new_claims(self, user_id: str, username: str, email: str) -> SessionClaims:
        now = self._clock().replace(microsecond=0)
        return SessionClaims(
            user_id=user_id,
            username=username,
            email=email,
            issued_at=now,
            not_before=now,
            expires_at=now + self._token_duration,
            token_id=str(uuid.uuid4()),
        )

    def _sign(self, claims: SessionClaims) -> str:
        try:
            return jwt.encode(claims.to_payload(), self._secret_key, algorithm=SIGNING_ALGORITHM)
        except (JOSEError, TypeError, ValueError) as exc:
            raise SigningError("Failed to sign session token") from exc

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_token(self, token: str) -> SessionClaims:
        """Verify signature and validity window; return the claims.

        Raises SignatureInvalidError, TokenExpiredError, TokenNotYetValidError
        or TokenIssuedInFutureError.
        """
        claims = self._decode(token)
        self._check_timing(claims)
        return claims

    def _decode(self, token: str) -> SessionClaims:
        try:
            _check_signature_encoding(token)
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=HMAC_ALGORITHMS,
                options=_DECODE_OPTIONS,
            )
        except (JOSEError, TypeError, ValueError) as exc:
            raise SignatureInvalidError("Token signature could not be verified") from exc
        return SessionClaims.from_payload(payload)

    def _check_timing(self, claims: SessionClaims) -> None:
        now = self._clock()
        if claims.expires_at is not None and claims.expires_at < now:
            raise TokenExpiredError("Token has expired")
        if claims.not_before is not None and claims.not_before > now:
            raise TokenNotYetValidError("Token not yet valid")
        if claims.issued_at is not None and claims.issued_at > now:
            raise TokenIssuedInFutureError("Token issued in the future")

    # ------------------------------------------------------------------
    # Inspection (signature checked, validity window NOT enforced)
    # ------------------------------------------------------------------

    def is_token_expired(self, token: str) -> bool:
        """Return True if the token is past ``exp`` or cannot be decoded.

        Unlike ``validate_token`` this ignores ``nbf`` and ``iat``; keep the
        two paths separate. A token that fails signature verification is
        reported as expired rather than invalid, and one without ``exp`` is
        reported as not expired.
        """
        try:
            claims = self._decode(token)
        except SignatureInvalidError:
            return True
        if claims.expires_at is None:
            return False
        return claims.expires_at < self._clock()

    def get_token_expiration(self, token: str) -> datetime:
        """Return the ``exp`` of a signature-valid token, lapsed or not."""
        claims = self._decode(token)
        if claims.expires_at is None:
            raise NoExpirationClaimError("Token has no expiration claim")
        return claims.expires_at

    def get_time_until_expiration(self, token: str) -> timedelta:
        """Time left before ``exp``; negative once the token has expired."""
        return self.get_token_expiration(token) - self._clock()
