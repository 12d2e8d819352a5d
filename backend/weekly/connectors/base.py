"""
Base connector class.

Each connector inherits from this class and defines its own:
- Metadata (id, display name, description)
- Credential fields and the settings/env keys they come from
- A single lightweight verification call used by connect()
- Read operations that take the session produced by connect()

Connectors hold no connection state. connect() hands back a session
(token or credentials object) inside the ConnectionResult; the registry
stores it and passes it back to every read call.
"""

import asyncio
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx

from weekly.core.config import Settings, settings as default_settings
from weekly.core.exceptions import AppError, ConfigurationMissingError, NotConnectedError
from weekly.core.logging import get_logger
from weekly.models.datasource import ConnectionResult

logger = get_logger(__name__)

# Thread pool for vendor SDKs that are synchronous (slack_sdk, googleapiclient)
_executor = ThreadPoolExecutor(max_workers=8)


@dataclass
class CredentialField:
    """Definition for a credential field."""
    name: str  # Settings attribute (e.g., "slack_bot_token")
    env_var: str  # Environment variable name (e.g., "SLACK_BOT_TOKEN")
    display_name: str  # User-facing name (e.g., "Bot Token")
    description: str = ""
    required: bool = True


@dataclass
class ConnectorMetadata:
    """Connector metadata for listings."""
    id: str  # Unique identifier (e.g., "slack")
    name: str  # Display name (e.g., "Slack")
    description: str  # Short description


class BaseConnector(ABC):
    """
    Base class for all data source connectors.

    To add a new connector:
    1. Create a new file in weekly/connectors/ (e.g., myconnector.py)
    2. Create a class that inherits from BaseConnector
    3. Implement metadata, credential_fields and verify()
    4. Register it in weekly/connectors/__init__.py
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or default_settings
        self._transport = transport

    @property
    @abstractmethod
    def metadata(self) -> ConnectorMetadata:
        """Return connector metadata."""
        pass

    @property
    @abstractmethod
    def credential_fields(self) -> List[CredentialField]:
        """Credential fields this connector reads from settings."""
        pass

    @abstractmethod
    async def verify(self, credentials: Dict[str, str]) -> Tuple[Any, str]:
        """
        Perform exactly one lightweight call against the vendor.

        Returns:
            Tuple of (session, success message). Raises on auth or
            network failure; connect() turns the exception into text.
        """
        pass

    @property
    def name(self) -> str:
        return self.metadata.name

    # ============ Credentials ============

    def resolve_credentials(self) -> Dict[str, str]:
        """Read every credential field from settings, stripped."""
        creds = {}
        for field in self.credential_fields:
            value = getattr(self.settings, field.name, "") or ""
            creds[field.name] = str(value).strip()
        return creds

    def missing_credentials(self) -> List[str]:
        """Environment keys of required credentials that are not set."""
        creds = self.resolve_credentials()
        return [
            field.env_var
            for field in self.credential_fields
            if field.required and not creds.get(field.name)
        ]

    def missing_credentials_message(self, missing: List[str]) -> str:
        return ConfigurationMissingError(self.name, missing).message

    # ============ Lifecycle ============

    async def connect(self) -> ConnectionResult:
        """
        Check credentials and verify them against the vendor.

        Never raises. A missing credential or a vendor failure comes back
        as ``success=False`` with a message naming the problem.
        """
        missing = self.missing_credentials()
        if missing:
            message = self.missing_credentials_message(missing)
            logger.info(
                f"{self.name} credentials missing",
                extra={"datasource": self.metadata.id, "missing": missing},
            )
            return ConnectionResult(success=False, message=message)

        try:
            session, message = await self.verify(self.resolve_credentials())
        except Exception as e:
            reason = e.message if isinstance(e, AppError) else str(e) or type(e).__name__
            logger.warning(
                f"Failed to connect to {self.name}: {reason}",
                extra={"datasource": self.metadata.id},
            )
            return ConnectionResult(success=False, message=f"Failed to connect to {self.name}: {reason}")

        logger.info(message, extra={"datasource": self.metadata.id})
        return ConnectionResult(success=True, message=message, session=session)

    def require_session(self, session: Any) -> Any:
        """Fail with NotConnectedError when no session is available."""
        if session is None:
            raise NotConnectedError(self.name)
        return session

    # ============ Helpers ============

    def http_client(self, **kwargs) -> httpx.AsyncClient:
        """AsyncClient bounded by the connector timeout."""
        kwargs.setdefault("timeout", self.settings.connector_timeout_seconds)
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)

    @staticmethod
    async def run_sync(func: Callable[..., Any], *args, **kwargs) -> Any:
        """Run a blocking SDK call in the connector thread pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(_executor, partial(func, *args, **kwargs))

    def to_dict(self) -> Dict[str, Any]:
        """Convert connector metadata to dict for API responses."""
        meta = self.metadata
        return {
            "id": meta.id,
            "name": meta.name,
            "description": meta.description,
            "credentials": [field.env_var for field in self.credential_fields],
        }
