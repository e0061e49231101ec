"""YAML configuration for layout parameters and the initial view box."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from .model import VIEWBOX_HEIGHT_INITIAL, VIEWBOX_WIDTH_INITIAL, LayoutConfig, ViewBox


@dataclass(frozen=True)
class AtlasSettings:
    """Everything a map session needs besides the map itself."""

    layout: LayoutConfig = field(default_factory=LayoutConfig)
    view_box: ViewBox | None = None
    base_width: float = VIEWBOX_WIDTH_INITIAL
    base_height: float = VIEWBOX_HEIGHT_INITIAL


def load_config(config_path: Path) -> dict:
    """Load configuration from YAML file.

    Args:
        config_path: Path to the YAML config file.

    Returns:
        Dictionary of configuration values (empty for an empty file).

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file does not contain a mapping.
    """
    with open(config_path) as f:
        config = yaml.safe_load(f)
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"{config_path}: expected a mapping at the top level")
    return config


def layout_config_from_mapping(values: dict[str, Any], base: LayoutConfig | None = None) -> LayoutConfig:
    """Build a clamped LayoutConfig from snake_case or UPPER_CASE keys.

    Unknown keys and non-numeric values are ignored with a warning.
    """
    known = {f.name for f in fields(LayoutConfig)}
    updates: dict[str, float] = {}
    for key, value in values.items():
        name = str(key).lower()
        if name not in known:
            logger.warning("Ignoring unknown layout setting {!r}", key)
            continue
        try:
            updates[name] = float(value)
        except (TypeError, ValueError):
            logger.warning("Ignoring non-numeric layout setting {}={!r}", key, value)
    current = base or LayoutConfig()
    return LayoutConfig(**{**{f.name: getattr(current, f.name) for f in fields(LayoutConfig)}, **updates}).clamped()


def settings_from_mapping(config: dict[str, Any]) -> AtlasSettings:
    """Interpret a loaded config file.

    Recognised keys: ``layout`` (mapping), ``view_box`` (``"x y w h"``),
    ``base_width`` and ``base_height``.
    """
    base_width = float(config.get("base_width", VIEWBOX_WIDTH_INITIAL))
    base_height = float(config.get("base_height", VIEWBOX_HEIGHT_INITIAL))
    if base_width <= 0 or base_height <= 0:
        logger.warning("Ignoring non-positive base view size {}x{}", base_width, base_height)
        base_width, base_height = VIEWBOX_WIDTH_INITIAL, VIEWBOX_HEIGHT_INITIAL

    view_box = None
    if config.get("view_box"):
        view_box = ViewBox.parse(str(config["view_box"]), ViewBox.default(base_width, base_height))

    return AtlasSettings(
        layout=layout_config_from_mapping(config.get("layout") or {}),
        view_box=view_box,
        base_width=base_width,
        base_height=base_height,
    )
