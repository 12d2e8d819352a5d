"""
Slack connector.

Uses the Slack Web API via slack_sdk. The SDK is synchronous, so every
call runs in the connector thread pool. The session is the token that
passed auth.test.
"""

from typing import Any, Dict, List, Tuple

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from weekly.connectors.base import BaseConnector, ConnectorMetadata, CredentialField
from weekly.core.exceptions import AuthenticationFailedError, VendorRequestFailedError
from weekly.core.logging import get_logger
from weekly.models.records import SlackConversation, SlackMessage

logger = get_logger(__name__)

DEFAULT_CONVERSATION_TYPES = "public_channel,private_channel"


def _slack_error(e: SlackApiError) -> str:
    """Short error code from a Slack API error (e.g. 'invalid_auth')."""
    response = getattr(e, "response", None)
    if response is not None:
        try:
            return response["error"]
        except (KeyError, TypeError):
            pass
    return str(e)


class SlackConnector(BaseConnector):
    """Slack workspace connector."""

    @property
    def metadata(self) -> ConnectorMetadata:
        return ConnectorMetadata(
            id="slack",
            name="Slack",
            description="Channels, conversations and message history",
        )

    @property
    def credential_fields(self) -> List[CredentialField]:
        return [
            CredentialField(
                name="slack_bot_token",
                env_var="SLACK_BOT_TOKEN",
                display_name="Bot Token",
                description="Bot User OAuth Token (xoxb-)",
                required=False,
            ),
            CredentialField(
                name="slack_user_token",
                env_var="SLACK_USER_TOKEN",
                display_name="User Token",
                description="User OAuth Token (xoxp-)",
                required=False,
            ),
        ]

    def missing_credentials(self) -> List[str]:
        # Either token is enough; the bot token wins when both are set.
        creds = self.resolve_credentials()
        if creds["slack_bot_token"] or creds["slack_user_token"]:
            return []
        return ["SLACK_BOT_TOKEN", "SLACK_USER_TOKEN"]

    def missing_credentials_message(self, missing: List[str]) -> str:
        return "Slack token not configured. Please set SLACK_BOT_TOKEN or SLACK_USER_TOKEN in .env"

    def _client(self, token: str) -> WebClient:
        return WebClient(token=token, timeout=int(self.settings.connector_timeout_seconds))

    async def verify(self, credentials: Dict[str, str]) -> Tuple[Any, str]:
        token = credentials["slack_bot_token"] or credentials["slack_user_token"]
        client = self._client(token)
        try:
            auth = await self.run_sync(client.auth_test)
        except SlackApiError as e:
            raise AuthenticationFailedError("slack", _slack_error(e))
        return token, f"Connected to Slack workspace: {auth.get('team')}"

    async def fetch_conversations(
        self,
        session: Any,
        limit: int = 20,
        types: str = DEFAULT_CONVERSATION_TYPES,
    ) -> List[SlackConversation]:
        """List channels and conversations (single page, no pagination)."""
        client = self._client(self.require_session(session))
        try:
            result = await self.run_sync(
                client.conversations_list,
                limit=limit,
                types=types,
                exclude_archived=True,
            )
        except SlackApiError as e:
            logger.error(f"Error listing channels: {e}")
            raise VendorRequestFailedError("slack", "fetch Slack conversations", _slack_error(e))

        return SlackConversation.from_api_list(result.get("channels"))

    async def fetch_conversation_history(
        self,
        session: Any,
        channel_id: str,
        limit: int = 100,
    ) -> List[SlackMessage]:
        """Read recent messages from one channel."""
        client = self._client(self.require_session(session))
        try:
            result = await self.run_sync(client.conversations_history, channel=channel_id, limit=limit)
        except SlackApiError as e:
            logger.error(f"Error reading history for {channel_id}: {e}")
            raise VendorRequestFailedError("slack", "fetch conversation history", _slack_error(e))

        return SlackMessage.from_api_list(result.get("messages"))
