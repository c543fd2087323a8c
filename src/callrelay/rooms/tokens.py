"""
Room access tokens.

Signing is delegated to the LiveKit server SDK; this module only fixes the
grant set every participant receives.
"""

from livekit import api

from callrelay.rooms.config import LiveKitConfig
from callrelay.shared.logging import get_logger

logger = get_logger(__name__)


def room_grants(room: str) -> api.VideoGrants:
    """Grants for a participant: join, publish media and data, subscribe."""
    return api.VideoGrants(
        room=room,
        room_join=True,
        can_publish=True,
        can_publish_data=True,
        can_subscribe=True,
    )


class RoomTokenIssuer:
    """Mints signed access tokens for LiveKit rooms."""

    def __init__(self, config: LiveKitConfig) -> None:
        self._config = config

    def issue(self, identity: str, room: str) -> str:
        """Return a signed JWT for ``identity`` scoped to ``room``.

        Raises:
            ValueError: the API key or secret is not configured.
        """
        token = (
            api.AccessToken(self._config.api_key, self._config.api_secret)
            .with_identity(identity)
            .with_grants(room_grants(room))
        )
        jwt = token.to_jwt()

        logger.info("Room token issued", extra={"identity": identity, "room": room})
        return jwt
