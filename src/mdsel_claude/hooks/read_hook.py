"""PreToolUse hook that nudges agents away from reading large Markdown files.

Claude Code runs the hook before every ``Read`` call and passes the event as
JSON on stdin. The hook never blocks: it always answers ``continue: true``
and, for Markdown files over the word threshold, attaches a fixed reminder
pointing at the mdsel tools.

Install in ``~/.claude/settings.json``::

    {
      "hooks": {
        "PreToolUse": [
          {
            "matcher": "Read",
            "hooks": [{"type": "command", "command": "mdsel-claude hook"}]
          }
        ]
      }
    }
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TextIO

from mdsel_claude.config import get_threshold
from mdsel_claude.models import HookInput, HookOutput
from mdsel_claude.utils.text import count_words

logger = logging.getLogger(__name__)

READ_TOOL_NAME = "Read"
MARKDOWN_SUFFIX = ".md"

# Exact wording, emitted identically every time
REMINDER_MESSAGE = (
    "This is a Markdown file over the configured size threshold.\n"
    "Use mdsel_index and mdsel_select instead of Read."
)


def _resolve(file_path: str, cwd: str) -> Path:
    path = Path(file_path).expanduser()
    if cwd and not path.is_absolute():
        path = Path(cwd) / path
    return path


def process(hook_input: HookInput) -> HookOutput:
    """Decide whether to attach the reminder to a pending read."""
    if hook_input.tool_name != READ_TOOL_NAME:
        return HookOutput()

    if not hook_input.file_path.lower().endswith(MARKDOWN_SUFFIX):
        return HookOutput()

    try:
        path = _resolve(hook_input.file_path, hook_input.cwd)
        # FIFOs and device nodes would block the read
        if not path.is_file():
            return HookOutput()
        content = path.read_text(encoding="utf-8", errors="replace")
    except (OSError, ValueError, RuntimeError) as e:
        # The Read tool reports its own errors; an unknown ~user raises RuntimeError
        logger.debug("Skipping word count for %s: %s", hook_input.file_path, e)
        return HookOutput()

    word_count = count_words(content)
    threshold = get_threshold()
    if word_count > threshold:
        logger.info("Reminder for %s (%d words > %d)", hook_input.file_path, word_count, threshold)
        return HookOutput(reminder_message=REMINDER_MESSAGE)
    return HookOutput()


def main(stdin: TextIO | None = None, stdout: TextIO | None = None) -> int:
    """Read one hook event from stdin and write the decision to stdout."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    output = HookOutput()
    try:
        event = json.loads(stdin.read())
        if isinstance(event, dict):
            output = process(HookInput.from_event(event))
        else:
            logger.debug("Ignoring non-object hook payload")
    except Exception:
        logger.exception("Hook processing failed; allowing read")

    stdout.write(output.to_json() + "\n")
    stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
