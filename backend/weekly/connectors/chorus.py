"""Chorus.ai connector: call recordings over the Chorus REST API."""

from typing import Any, Dict, List, Optional, Tuple

import httpx

from weekly.connectors.base import BaseConnector, ConnectorMetadata, CredentialField
from weekly.core.exceptions import AuthenticationFailedError, VendorRequestFailedError
from weekly.core.logging import get_logger
from weekly.models.records import ChorusRecording

logger = get_logger(__name__)


class ChorusConnector(BaseConnector):
    """Chorus.ai call intelligence connector. The session is the API key."""

    @property
    def metadata(self) -> ConnectorMetadata:
        return ConnectorMetadata(
            id="chorus",
            name="Chorus.ai",
            description="Call recordings, transcripts and insights",
        )

    @property
    def credential_fields(self) -> List[CredentialField]:
        return [
            CredentialField(
                name="chorus_api_key",
                env_var="CHORUS_API_KEY",
                display_name="API Key",
            ),
        ]

    def missing_credentials_message(self, missing: List[str]) -> str:
        return "Chorus.ai API key not configured. Please set CHORUS_API_KEY in .env"

    @property
    def base_url(self) -> str:
        return (self.settings.chorus_api_base_url or "https://api.chorus.ai/v1").rstrip("/")

    def _client(self, api_key: str) -> httpx.AsyncClient:
        return self.http_client(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
        )

    async def verify(self, credentials: Dict[str, str]) -> Tuple[Any, str]:
        api_key = credentials["chorus_api_key"]
        async with self._client(api_key) as client:
            response = await client.get("/account")

        if response.status_code >= 400:
            raise AuthenticationFailedError(
                "chorus", f"Chorus.ai authentication failed: {response.reason_phrase}"
            )
        return api_key, "Connected to Chorus.ai successfully"

    async def fetch_recordings(
        self,
        session: Any,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        limit: int = 20,
    ) -> List[ChorusRecording]:
        """List recent call recordings."""
        api_key = self.require_session(session)

        params = {"limit": limit}
        if from_date:
            params["from"] = from_date
        if to_date:
            params["to"] = to_date

        try:
            async with self._client(api_key) as client:
                response = await client.get("/calls", params=params)
        except httpx.HTTPError as e:
            logger.error(f"Chorus.ai request failed: {e}")
            raise VendorRequestFailedError("chorus", "fetch Chorus.ai recordings", str(e) or type(e).__name__)

        if response.status_code >= 400:
            raise VendorRequestFailedError(
                "chorus", "fetch Chorus.ai recordings",
                f"Failed to fetch recordings: {response.reason_phrase}",
            )

        calls = response.json().get("calls") or []
        return ChorusRecording.from_api_list(calls)
