"""
Render configuration with environment overrides.

Resolution order (later wins):
1. DEFAULT_RENDER_CONFIG
2. Environment variables (ERRTREE_MAX_DEPTH, ERRTREE_MAX_FRAMES, ERRTREE_COLOR)
3. Explicit keyword arguments to load_render_config()

Bad environment values are logged and ignored so a typo in a shell profile
never breaks error reporting. Bad explicit arguments raise ValueError.
"""

import logging
import os
from typing import Optional, TypedDict

from errtree.tree_types import DEFAULT_MAX_DEPTH, DEFAULT_MAX_FRAMES, MAX_ALLOWED_DEPTH

logger = logging.getLogger("errtree.config")

_FALSY = ("0", "false", "no", "off")
_TRUTHY = ("1", "true", "yes", "on")


class RenderConfig(TypedDict):
    """
    Configuration for one render call.

    max_depth: Nested levels rendered before a branch is cut with a
               truncation marker. Default: 10
    max_frames: Frame identities remembered for deduplication.
                Default: 64
    color: Italicize locations with ANSI escapes. Default: False
    """

    max_depth: int
    max_frames: int
    color: bool


DEFAULT_RENDER_CONFIG: RenderConfig = {
    "max_depth": DEFAULT_MAX_DEPTH,
    "max_frames": DEFAULT_MAX_FRAMES,
    "color": False,
}


def _validate_depth(value: int) -> int:
    if value < 1 or value > MAX_ALLOWED_DEPTH:
        raise ValueError(f"max_depth must be between 1 and {MAX_ALLOWED_DEPTH}, got {value}")
    return value


def _validate_frames(value: int) -> int:
    if value < 0:
        raise ValueError(f"max_frames must be non-negative, got {value}")
    return value


def _env_int(name: str, validate) -> Optional[int]:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return validate(int(raw))
    except ValueError as e:
        logger.warning(f"Ignoring {name}={raw!r}: {e}")
        return None


def _env_bool(name: str) -> Optional[bool]:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    logger.warning(f"Ignoring {name}={raw!r}: expected one of {_TRUTHY + _FALSY}")
    return None


def load_render_config(
    max_depth: Optional[int] = None,
    max_frames: Optional[int] = None,
    color: Optional[bool] = None,
) -> RenderConfig:
    """
    Build a RenderConfig from defaults, environment and explicit arguments.

    Args:
        max_depth: Explicit depth cap (1..MAX_ALLOWED_DEPTH)
        max_frames: Explicit frame table size (>= 0)
        color: Explicit color switch

    Returns:
        Fully populated RenderConfig

    Raises:
        ValueError: If an explicit argument is out of range
    """
    config: RenderConfig = dict(DEFAULT_RENDER_CONFIG)  # type: ignore[assignment]

    env_depth = _env_int("ERRTREE_MAX_DEPTH", _validate_depth)
    if env_depth is not None:
        config["max_depth"] = env_depth
    env_frames = _env_int("ERRTREE_MAX_FRAMES", _validate_frames)
    if env_frames is not None:
        config["max_frames"] = env_frames
    env_color = _env_bool("ERRTREE_COLOR")
    if env_color is not None:
        config["color"] = env_color

    if max_depth is not None:
        config["max_depth"] = _validate_depth(max_depth)
    if max_frames is not None:
        config["max_frames"] = _validate_frames(max_frames)
    if color is not None:
        config["color"] = color

    return config
