"""LiveKit room-token integration.

Builds LiveKit participant access tokens locally. A LiveKit access token is
an HS256 JWT signed with the API secret, issued by the API key, carrying the
participant identity and a ``video`` grant scoped to one room.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any

import jwt
from pydantic import SecretStr

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_TTL_SECONDS = 60 * 60


class LiveKitError(RuntimeError):
    """Raised when LiveKit is misconfigured or a token cannot be built."""

    def __init__(self, message: str, *, details: Any | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class LiveKitClient:
    """Participant token builder for a LiveKit deployment."""

    def __init__(
        self,
        *,
        api_key: str | None,
        api_secret: str | SecretStr | None,
        ws_url: str | None,
    ) -> None:
        self._api_key = api_key
        self._api_secret = (
            api_secret.get_secret_value() if isinstance(api_secret, SecretStr) else api_secret
        )
        self._ws_url = ws_url

    def _ensure_config(self) -> None:
        if not self._api_key or not self._api_secret or not self._ws_url:
            logger.error(
                "LiveKit settings are missing. Set LIVEKIT_WS_URL, LIVEKIT_API_KEY "
                "and LIVEKIT_API_SECRET."
            )
            raise LiveKitError("LiveKit configuration is incomplete")

    @property
    def websocket_url(self) -> str:
        self._ensure_config()
        return str(self._ws_url)

    def create_participant_token(
        self,
        *,
        room_name: str,
        identity: str,
        name: str | None = None,
        metadata: dict[str, Any] | None = None,
        can_publish: bool = True,
        ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS,
    ) -> str:
        """Build a join token for one participant of one room.

        The frontend SDK connects to ``websocket_url`` with this token.
        """
        self._ensure_config()
        now = int(time.time())
        payload: dict[str, Any] = {
            "iss": self._api_key,
            "sub": identity,
            "jti": identity,
            "nbf": now,
            "exp": now + ttl_seconds,
            "video": {
                "roomJoin": True,
                "room": room_name,
                "canSubscribe": True,
                "canPublish": can_publish,
                "canPublishData": True,
            },
        }
        if name:
            payload["name"] = name
        if metadata:
            payload["metadata"] = json.dumps(metadata)

        try:
            token: str = jwt.encode(
                payload,
                self._api_secret,
                algorithm="HS256",
                headers={"alg": "HS256", "typ": "JWT"},
            )
        except jwt.PyJWTError as exc:
            raise LiveKitError(f"Failed to sign LiveKit token: {exc}") from exc
        return token


class FakeLiveKitClient:
    """In-memory stub for testing/non-production environments."""

    def __init__(self, ws_url: str | None = None, **kwargs: Any) -> None:
        self._ws_url = ws_url or "ws://localhost:7880"
        self._calls: list[dict[str, Any]] = []
        self._error: LiveKitError | None = None

    @property
    def calls(self) -> list[dict[str, Any]]:
        return self._calls

    def set_error(self, error: LiveKitError | None) -> None:
        """Inject an error for deterministic failure testing."""
        self._error = error

    @property
    def websocket_url(self) -> str:
        return self._ws_url

    def create_participant_token(self, *, room_name: str, identity: str, **kwargs: Any) -> str:
        self._calls.append(
            {
                "method": "create_participant_token",
                "room_name": room_name,
                "identity": identity,
                **kwargs,
            }
        )
        if self._error is not None:
            raise self._error
        return f"fake_livekit_token_{room_name}_{identity}"
