"""System utility checks."""

from __future__ import annotations

import shutil
import subprocess


def check_mdsel_cli(binary: str = "mdsel") -> tuple[bool, str]:
    """Check if the mdsel CLI is installed and return its version."""
    mdsel_path = shutil.which(binary)
    if not mdsel_path:
        return False, f"mdsel CLI not found ({binary}). Install: npm install -g mdsel"
    try:
        result = subprocess.run(
            [mdsel_path, "--version"],
            capture_output=True,
            text=True,
            timeout=10,
        )
        version = result.stdout.strip() or result.stderr.strip()
        return True, version or mdsel_path
    except subprocess.TimeoutExpired:
        return False, "mdsel CLI version check timed out"
    except OSError as e:
        return False, f"Error checking mdsel CLI: {e}"
