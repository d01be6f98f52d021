"""Data models for mdsel-claude."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

OPERATIONS = ("index", "select")


@dataclass(frozen=True)
class ExecutionRequest:
    """One invocation of the mdsel CLI."""

    operation: str
    args: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.operation not in OPERATIONS:
            raise ValueError(f"Unsupported mdsel operation: {self.operation!r}")

    def argv(self, binary: str) -> list[str]:
        return [binary, self.operation, *self.args]


@dataclass(frozen=True)
class ExecutionResult:
    """Result from an mdsel CLI run. Streams are kept verbatim."""

    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True)
class ToolResult:
    """Text handed back to the agent for a tool call."""

    text: str
    is_error: bool = False


@dataclass(frozen=True)
class HookInput:
    """A PreToolUse event for a pending file read."""

    session_id: str = ""
    tool_name: str = ""
    file_path: str = ""
    cwd: str = ""

    @classmethod
    def from_event(cls, event: dict[str, Any]) -> HookInput:
        tool_input = event.get("tool_input")
        if not isinstance(tool_input, dict):
            tool_input = {}
        return cls(
            session_id=_as_str(event.get("session_id")),
            tool_name=_as_str(event.get("tool_name")),
            file_path=_as_str(tool_input.get("file_path")),
            cwd=_as_str(event.get("cwd")),
        )


@dataclass(frozen=True)
class HookOutput:
    """Hook decision. The read is always allowed to continue."""

    should_continue: bool = True
    reminder_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"continue": self.should_continue}
        if self.reminder_message is not None:
            data["systemMessage"] = self.reminder_message
            data["hookSpecificOutput"] = {
                "hookEventName": "PreToolUse",
                "additionalContext": self.reminder_message,
            }
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""
