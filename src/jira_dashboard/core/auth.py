"""
Request credentials: the service token used for catalog calls and the
caller's identity.

Both are resolved once per request into a RequestContext that is passed
down the call chain explicitly.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import Request

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """The signed-in user making a request."""

    user_entity_ref: str
    token: str

    @property
    def username(self) -> str:
        """Name part of the user entity ref (``user:default/jdoe`` -> ``jdoe``)."""
        return self.user_entity_ref.rsplit("/", 1)[-1].split(":", 1)[-1]


@dataclass(frozen=True)
class RequestContext:
    """Credentials for one inbound request."""

    service_token: Optional[str]
    identity: Optional[Identity] = None

    @property
    def user_entity_ref(self) -> Optional[str]:
        return self.identity.user_entity_ref if self.identity else None


class TokenManager:
    """Issues the service token used to call the catalog."""

    def __init__(self, token: Optional[str] = None) -> None:
        self._token = token

    async def get_token(self) -> Optional[str]:
        return self._token


class IdentityResolver:
    """
    Resolve the caller from the ``Authorization: Bearer <jwt>`` header.

    The token was issued (and is verified) by the identity provider in front
    of this service; only its ``sub`` claim is read here.
    """

    async def get_identity(self, request: Request) -> Optional[Identity]:
        header = request.headers.get("authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token:
            return None

        try:
            claims = jwt.decode(token, options={"verify_signature": False})
        except jwt.PyJWTError as e:
            logger.info("Ignoring unreadable bearer token: %s", e)
            return None

        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject:
            return None
        return Identity(user_entity_ref=subject, token=token)
