import logging
import os
from typing import Any

ENV_LEVEL = "SHADOWFORGE_LOG_LEVEL"


def _parse_level(s: str | None) -> int | None:
    if not s:
        return None
    v = str(s).strip().upper()
    if v == "WARN":
        v = "WARNING"
    level = logging.getLevelName(v)
    return level if isinstance(level, int) else None


def setup_logging(args: Any = None, *, name: str = "shadowforge") -> None:
    """Configure logging once.

    Priority: env SHADOWFORGE_LOG_LEVEL, then --verbose/--quiet, then INFO.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    level = logging.INFO
    if args is not None and getattr(args, "quiet", False):
        level = logging.WARNING
    if args is not None and getattr(args, "verbose", False):
        level = logging.DEBUG
    env_level = _parse_level(os.environ.get(ENV_LEVEL))
    if env_level is not None:
        level = env_level

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger(name).debug("logging initialized (level=%s)", logging.getLevelName(level))
