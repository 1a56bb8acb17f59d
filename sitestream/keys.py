"""Provider API key loading for sitestream.

Keys are process-wide configuration, resolved once at startup and loaded
with this priority:
  1. Environment variables (highest — already set in shell)
  2. ~/.sitestream/keys.env
  3. .env in current directory (project-level)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from sitestream.schemas.config import Settings

logger = logging.getLogger(__name__)

SITESTREAM_HOME = Path.home() / ".sitestream"
KEYS_FILE = SITESTREAM_HOME / "keys.env"


def load_keys_env() -> None:
    """Load API keys from ~/.sitestream/keys.env and .env into os.environ.

    Existing env vars are NOT overwritten, and neither file overwrites a
    value loaded from an earlier one.
    """
    files = [KEYS_FILE, Path.cwd() / ".env"]
    for env_file in files:
        if env_file.is_file():
            _load_env_file(env_file)


def _load_env_file(path: Path) -> None:
    """Parse a simple KEY=VALUE .env file and set vars that aren't already set."""
    try:
        for line in path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip().strip("'\"")
            if key and not os.environ.get(key):
                os.environ[key] = value
                logger.debug("Loaded %s from %s", key, path)
    except OSError:
        logger.debug("Could not read %s", path)


def key_status(settings: Settings) -> dict[str, bool]:
    """Map each configured provider to whether its API key is present."""
    return {
        name: bool(os.environ.get(provider.api_key_env))
        for name, provider in settings.providers.items()
    }


def has_any_key(settings: Settings) -> bool:
    """Check if at least one provider API key is configured."""
    return any(key_status(settings).values())
