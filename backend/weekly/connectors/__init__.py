"""
Connector registry.

Connectors are stateless, so each conversation builds its own set from a
Settings object. To add a new connector:
1. Create a new file in weekly/connectors/ (e.g., myconnector.py)
2. Create a class that inherits from BaseConnector
3. Add the class to CONNECTOR_CLASSES below (order = listing order)
"""

from typing import Dict, List, Optional, Type

import httpx

from weekly.core.config import Settings

from .base import BaseConnector, ConnectorMetadata, CredentialField
from .slack import SlackConnector
from .zoom import ZoomConnector
from .chorus import ChorusConnector
from .sheets import SheetsConnector

CONNECTOR_CLASSES: List[Type[BaseConnector]] = [
    SlackConnector,
    ZoomConnector,
    ChorusConnector,
    SheetsConnector,
]


def build_connectors(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, BaseConnector]:
    """
    Instantiate every built-in connector.

    Returns:
        Dict of connector id -> connector, in registration order
    """
    connectors = [cls(settings=settings, transport=transport) for cls in CONNECTOR_CLASSES]
    return {connector.metadata.id: connector for connector in connectors}


__all__ = [
    "BaseConnector",
    "ConnectorMetadata",
    "CredentialField",
    "SlackConnector",
    "ZoomConnector",
    "ChorusConnector",
    "SheetsConnector",
    "CONNECTOR_CLASSES",
    "build_connectors",
]
