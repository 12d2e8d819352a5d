"""Weekly update assistant: data source tools for an LLM chat agent."""

__version__ = "1.0.0"
