"""Tool invocation and result envelope models."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


@dataclass
class ToolInvocation:
    """A single tool call requested by the model."""

    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)
    call_id: Optional[str] = None

    @classmethod
    def from_tool_use(cls, block: Any) -> "ToolInvocation":
        """Build from an Anthropic ``tool_use`` content block."""
        arguments = block.input if block.input is not None else {}
        return cls(name=block.name, arguments=arguments, call_id=block.id)

    def arguments_dict(self) -> Dict[str, Any]:
        """The arguments as a plain dict; non-object arguments become empty."""
        if isinstance(self.arguments, Mapping):
            return dict(self.arguments)
        return {}


class ToolResult:
    """
    Outcome of dispatching one tool: either ``Ok(payload)`` or ``Err(reason)``.

    Build instances with :meth:`ok` and :meth:`err`. The envelope shape is
    ``{"success": True, **payload}`` for Ok and
    ``{"success": False, "error": reason}`` for Err. An Ok payload may carry
    its own ``success`` key (a failed connect is reported as data, not as an
    error), which then wins over the default.
    """

    __slots__ = ("payload", "error")

    def __init__(self, payload: Optional[Dict[str, Any]] = None, error: Optional[str] = None):
        if (payload is None) == (error is None):
            raise ValueError("ToolResult needs exactly one of payload or error")
        self.payload = payload
        self.error = error

    @classmethod
    def ok(cls, payload: Dict[str, Any]) -> "ToolResult":
        return cls(payload=payload)

    @classmethod
    def err(cls, reason: str) -> "ToolResult":
        return cls(error=reason or "Unknown error")

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @property
    def success(self) -> bool:
        """The ``success`` flag as it appears in the envelope."""
        return bool(self.to_envelope()["success"])

    def to_envelope(self) -> Dict[str, Any]:
        if self.is_ok:
            return {"success": True, **self.payload}
        return {"success": False, "error": self.error}

    def to_json(self) -> str:
        return json.dumps(self.to_envelope(), indent=2, default=str)

    def __repr__(self) -> str:
        if self.is_ok:
            return f"ToolResult.ok({self.payload!r})"
        return f"ToolResult.err({self.error!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ToolResult):
            return NotImplemented
        return self.payload == other.payload and self.error == other.error
