"""Runtime version and declared-constraint lookup.

Both lookups answer "absent" (None) on any failure; neither raises.
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Optional, Sequence, Union

logger = logging.getLogger(__name__)

NODE_VERSION_COMMAND = ("node", "--version")
DEFAULT_TIMEOUT_SECONDS = 2.0

MANIFEST_NAME = "package.json"
ENGINES_KEY_PATH = ("engines", "node")


def fetch_runtime_version(
    command: Sequence[str] = NODE_VERSION_COMMAND,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> Optional[str]:
    """Run `command` and return its stdout, untrimmed.

    Args:
        command: Executable and its arguments (no shell involved)
        timeout: Seconds to wait before giving up

    Returns:
        Captured stdout, or None if the command is missing, times out,
        exits non-zero or fails with an OS error.
    """
    try:
        completed = subprocess.run(
            list(command),
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            stdin=subprocess.DEVNULL,
            text=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError:
        logger.debug(f"Command not found: {command[0]}")
        return None
    except subprocess.TimeoutExpired:
        logger.debug(f"Command timed out after {timeout}s: {' '.join(command)}")
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Command failed: {' '.join(command)}: {e}")
        return None

    if completed.returncode != 0:
        logger.debug(f"Command exited with {completed.returncode}: {' '.join(command)}")
        return None
    return completed.stdout


def fetch_declared_constraint(
    directory: Union[str, Path],
    manifest: str = MANIFEST_NAME,
    key_path: Sequence[str] = ENGINES_KEY_PATH,
) -> Optional[str]:
    """Read the declared runtime constraint from a JSON manifest.

    Walks `key_path` through nested objects and returns the string at its
    end. A missing or unreadable manifest, invalid JSON, a missing key or
    a non-string value all yield None.
    """
    manifest_path = Path(directory) / manifest
    try:
        payload = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return None

    node = payload
    for key in key_path:
        if not isinstance(node, dict) or key not in node:
            return None
        node = node[key]
    return node if isinstance(node, str) else None
