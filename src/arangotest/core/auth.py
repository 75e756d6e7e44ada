"""
Authentication specs for the test client
TEST_AUTHENTICATION takes one of:
    basic:<user>:<password>
    jwt:<user>:<password>
    super:<jwt secret>
"""

import time
from dataclasses import dataclass
from typing import Optional

import jwt

from ..utils.error_handling import InvalidArgumentError

AUTH_BASIC = "basic"
AUTH_JWT = "jwt"
AUTH_SUPER = "super"


@dataclass(frozen=True)
class AuthSpec:
    """Parsed authentication settings"""
    kind: str
    username: str = "root"
    password: str = ""
    secret: Optional[str] = None

    def db_kwargs(self) -> dict:
        """Keyword arguments for ArangoClient.db()"""
        if self.kind == AUTH_SUPER:
            return {"superuser_token": create_superuser_token(self.secret)}
        kwargs = {"username": self.username, "password": self.password}
        if self.kind == AUTH_JWT:
            kwargs["auth_method"] = "jwt"
        return kwargs


def parse_authentication(spec: Optional[str]) -> Optional[AuthSpec]:
    """Parse an authentication spec, returning None when no authentication is configured"""
    if not spec:
        return None
    parts = spec.split(":")
    kind = parts[0]
    if kind in (AUTH_BASIC, AUTH_JWT):
        if len(parts) != 3:
            raise InvalidArgumentError(f"Expected username & password for {kind} authentication")
        return AuthSpec(kind=kind, username=parts[1], password=parts[2])
    if kind == AUTH_SUPER:
        if len(parts) != 2:
            raise InvalidArgumentError("Expected 'super' and jwt secret")
        return AuthSpec(kind=kind, username="", secret=parts[1])
    raise InvalidArgumentError(f"Unknown authentication: '{kind}'")


def create_superuser_token(secret: str, server_id: str = "arangodb") -> str:
    """Create a superuser JWT signed with the server's JWT secret"""
    if not secret:
        raise InvalidArgumentError("JWT secret must not be empty")
    payload = {
        "iss": "arangodb",
        "server_id": server_id,
        "iat": int(time.time()),
    }
    return jwt.encode(payload, secret, algorithm="HS256")
