"""
Zoom connector.

Authenticates with a Server-to-Server OAuth app (account credentials
grant) and reads scheduled meetings from the Zoom REST API. The session
is the access token.
"""

from typing import Any, Dict, List, Optional, Tuple

import httpx

from weekly.connectors.base import BaseConnector, ConnectorMetadata, CredentialField
from weekly.core.exceptions import AuthenticationFailedError, VendorRequestFailedError
from weekly.core.logging import get_logger
from weekly.models.records import ZoomMeeting

logger = get_logger(__name__)

ZOOM_OAUTH_URL = "https://zoom.us/oauth/token"
ZOOM_API_BASE_URL = "https://api.zoom.us/v2"


class ZoomConnector(BaseConnector):
    """Zoom meetings connector."""

    @property
    def metadata(self) -> ConnectorMetadata:
        return ConnectorMetadata(
            id="zoom",
            name="Zoom",
            description="Scheduled meetings and participant counts",
        )

    @property
    def credential_fields(self) -> List[CredentialField]:
        return [
            CredentialField(
                name="zoom_client_id",
                env_var="ZOOM_CLIENT_ID",
                display_name="Client ID",
            ),
            CredentialField(
                name="zoom_client_secret",
                env_var="ZOOM_CLIENT_SECRET",
                display_name="Client Secret",
            ),
            CredentialField(
                name="zoom_account_id",
                env_var="ZOOM_ACCOUNT_ID",
                display_name="Account ID",
            ),
        ]

    async def verify(self, credentials: Dict[str, str]) -> Tuple[Any, str]:
        async with self.http_client() as client:
            response = await client.post(
                ZOOM_OAUTH_URL,
                params={
                    "grant_type": "account_credentials",
                    "account_id": credentials["zoom_account_id"],
                },
                auth=(credentials["zoom_client_id"], credentials["zoom_client_secret"]),
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )

        if response.status_code >= 400:
            raise AuthenticationFailedError("zoom", f"Zoom OAuth failed: {response.reason_phrase}")

        token = response.json().get("access_token")
        if not token:
            raise AuthenticationFailedError("zoom", "Zoom OAuth failed: no access token in response")
        return token, "Connected to Zoom successfully"

    async def fetch_meetings(
        self,
        session: Any,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        limit: int = 30,
    ) -> List[ZoomMeeting]:
        """List scheduled meetings for the account owner."""
        token = self.require_session(session)
        headers = {"Authorization": f"Bearer {token}"}

        try:
            async with self.http_client(base_url=ZOOM_API_BASE_URL, headers=headers) as client:
                user_response = await client.get("/users/me")
                if user_response.status_code >= 400:
                    raise VendorRequestFailedError(
                        "zoom", "fetch Zoom meetings",
                        f"Failed to get user info: {user_response.reason_phrase}",
                    )
                user_id = user_response.json()["id"]

                params = {"type": "scheduled", "page_size": limit}
                if from_date:
                    params["from"] = from_date
                if to_date:
                    params["to"] = to_date

                meetings_response = await client.get(f"/users/{user_id}/meetings", params=params)
                if meetings_response.status_code >= 400:
                    raise VendorRequestFailedError(
                        "zoom", "fetch Zoom meetings",
                        f"Failed to fetch meetings: {meetings_response.reason_phrase}",
                    )
                data = meetings_response.json()
        except httpx.HTTPError as e:
            logger.error(f"Zoom request failed: {e}")
            raise VendorRequestFailedError("zoom", "fetch Zoom meetings", str(e) or type(e).__name__)

        meetings = data.get("meetings") or []
        return ZoomMeeting.from_api_list(meetings[:limit])
