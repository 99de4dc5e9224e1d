"""Session token error taxonomy.

Every failure raised by :class:`app.auth.security.TokenService` derives from
:class:`TokenError`, so HTTP code can treat them uniformly as
"unauthenticated" while logs keep the specific kind.
"""


class TokenError(Exception):
    """Base class for session token failures."""

    reason = "Invalid token"


class SigningError(TokenError):
    """Token claims could not be encoded or signed."""

    reason = "Token could not be issued"


class SignatureInvalidError(TokenError):
    """Signature mismatch, unexpected algorithm, or malformed token."""

    reason = "Invalid token"


class TokenExpiredError(TokenError):
    reason = "Token has expired"


class TokenNotYetValidError(TokenError):
    reason = "Token not yet valid"


class TokenIssuedInFutureError(TokenError):
    reason = "Token issued in the future"


class NoExpirationClaimError(TokenError):
    """Token carries no ``exp`` claim. Raised by inspection helpers only."""

    reason = "Token has no expiration"
