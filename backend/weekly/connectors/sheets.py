"""
Google Sheets connector.

Authenticates with an OAuth client plus a long-lived refresh token and
uses the Drive v3 API to list spreadsheets and the Sheets v4 API to read
them. googleapiclient is synchronous, so calls run in the connector
thread pool. The session is the google-auth Credentials object.
"""

from typing import Any, Dict, List, Tuple

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from weekly.connectors.base import BaseConnector, ConnectorMetadata, CredentialField
from weekly.core.exceptions import AuthenticationFailedError, VendorRequestFailedError
from weekly.core.logging import get_logger
from weekly.models.records import GoogleSheet, SheetInfo

logger = get_logger(__name__)

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
SCOPES = [
    "https://www.googleapis.com/auth/drive.metadata.readonly",
    "https://www.googleapis.com/auth/spreadsheets.readonly",
]
SPREADSHEET_QUERY = "mimeType='application/vnd.google-apps.spreadsheet' and trashed=false"


def _google_error(e: Exception) -> str:
    if isinstance(e, HttpError):
        return getattr(e, "reason", None) or str(e)
    return str(e) or type(e).__name__


class SheetsConnector(BaseConnector):
    """Google Sheets / Drive connector."""

    @property
    def metadata(self) -> ConnectorMetadata:
        return ConnectorMetadata(
            id="sheets",
            name="Google Sheets",
            description="Spreadsheets from Google Drive",
        )

    @property
    def credential_fields(self) -> List[CredentialField]:
        return [
            CredentialField(
                name="google_client_id",
                env_var="GOOGLE_CLIENT_ID",
                display_name="OAuth Client ID",
            ),
            CredentialField(
                name="google_client_secret",
                env_var="GOOGLE_CLIENT_SECRET",
                display_name="OAuth Client Secret",
            ),
            CredentialField(
                name="google_refresh_token",
                env_var="GOOGLE_REFRESH_TOKEN",
                display_name="Refresh Token",
            ),
        ]

    def missing_credentials_message(self, missing: List[str]) -> str:
        return (
            "Google credentials not configured. Please set GOOGLE_CLIENT_ID, "
            "GOOGLE_CLIENT_SECRET, and GOOGLE_REFRESH_TOKEN in .env"
        )

    @staticmethod
    def _drive(creds: Credentials):
        return build("drive", "v3", credentials=creds, cache_discovery=False)

    @staticmethod
    def _sheets(creds: Credentials):
        return build("sheets", "v4", credentials=creds, cache_discovery=False)

    async def verify(self, credentials: Dict[str, str]) -> Tuple[Any, str]:
        creds = Credentials(
            token=None,
            refresh_token=credentials["google_refresh_token"],
            token_uri=GOOGLE_TOKEN_URI,
            client_id=credentials["google_client_id"],
            client_secret=credentials["google_client_secret"],
            scopes=SCOPES,
        )

        def _about():
            return self._drive(creds).about().get(fields="user").execute()

        try:
            about = await self.run_sync(_about)
        except HttpError as e:
            raise AuthenticationFailedError("sheets", _google_error(e))

        user = (about or {}).get("user") or {}
        logger.debug(f"Google Drive user: {user.get('emailAddress', 'unknown')}")
        return creds, "Connected to Google Sheets successfully"

    async def list_sheets(self, session: Any, limit: int = 10) -> List[GoogleSheet]:
        """List the most recently modified spreadsheets."""
        creds = self.require_session(session)

        def _list():
            return self._drive(creds).files().list(
                pageSize=limit,
                fields="files(id, name, webViewLink, modifiedTime)",
                q=SPREADSHEET_QUERY,
                orderBy="modifiedTime desc",
            ).execute()

        try:
            response = await self.run_sync(_list)
        except Exception as e:
            logger.error(f"Error listing spreadsheets: {e}")
            raise VendorRequestFailedError("sheets", "list Google Sheets", _google_error(e))

        return GoogleSheet.from_api_list(response.get("files"))

    async def read_range(self, session: Any, spreadsheet_id: str, range_: str) -> List[List[Any]]:
        """Read a cell range as rows of columns."""
        creds = self.require_session(session)

        def _read():
            return self._sheets(creds).spreadsheets().values().get(
                spreadsheetId=spreadsheet_id,
                range=range_,
            ).execute()

        try:
            response = await self.run_sync(_read)
        except Exception as e:
            logger.error(f"Error reading {spreadsheet_id}!{range_}: {e}")
            raise VendorRequestFailedError("sheets", "read sheet data", _google_error(e))

        return response.get("values") or []

    async def get_sheet_info(self, session: Any, spreadsheet_id: str) -> SheetInfo:
        """Spreadsheet title and tab layout."""
        creds = self.require_session(session)

        def _get():
            return self._sheets(creds).spreadsheets().get(spreadsheetId=spreadsheet_id).execute()

        try:
            response = await self.run_sync(_get)
        except Exception as e:
            logger.error(f"Error getting sheet info for {spreadsheet_id}: {e}")
            raise VendorRequestFailedError("sheets", "get sheet info", _google_error(e))

        return SheetInfo.from_api(response)
