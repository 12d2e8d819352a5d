"""Service modules."""

# Export core services
from weekly.services.registry import DataSourceRegistry
from weekly.services.dispatcher import ToolDispatcher, build_dispatcher
from weekly.services.chat_service import ChatLoop, ChatService, chat_service
