"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from typing import Final

ENV_PREFIX: Final[str] = "UPSERTER_"


def optional_env_var(name: str) -> str | None:
    """Return a stripped environment variable, treating blank values as unset."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()
