"""
Configuration management for the geotiler package.

This module provides configuration options for tile rendering including
pixel dimensions, padding, projection, output resolution and background.
"""

import json
import yaml
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from .constants import TILE_SIZE
from .exceptions import InvalidParameterError

PADDING_UNITS = ("px", "deg")
PROJECTIONS = ("linear", "mercator")


@dataclass
class Config:
    """Configuration for tile rendering.

    Attributes:
        width: Inner width of the tile in pixels.
        height: Inner height of the tile in pixels.
        padding: Padding added around the tile, in ``padding_unit``.
        padding_unit: Either "px" (absolute pixels) or "deg" (degrees,
            converted to pixels with the bounding box span).
        projection: Latitude transform, "linear" or "mercator".
        dpi: Resolution used by raster surfaces when writing images.
        background_color: Canvas color used when clearing ("none" keeps the
            canvas transparent).
        blur: Optional blur radius in pixels handed to the surface filter
            while drawing features.
        debug: Whether to draw the tile border and tile index overlay.
    """

    width: int = TILE_SIZE
    height: int = TILE_SIZE
    padding: float = 0.0
    padding_unit: str = "px"
    projection: str = "linear"
    dpi: int = 100
    background_color: str = "none"
    blur: Optional[float] = None
    debug: bool = False

    @classmethod
    def load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a YAML or JSON file.

        Args:
            path: Path to configuration file (.yaml, .yml, or .json).

        Returns:
            Config instance with loaded settings.

        Raises:
            InvalidParameterError: If file format is not supported or the
                file contains unknown settings.
            FileNotFoundError: If file does not exist.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, 'r') as f:
            if path.suffix in ['.yaml', '.yml']:
                data = yaml.safe_load(f) or {}
            elif path.suffix == '.json':
                data = json.load(f)
            else:
                raise InvalidParameterError(
                    f"Unsupported file format: {path.suffix}. Use .yaml, .yml, or .json"
                )

        unknown = set(data) - set(cls.__dataclass_fields__)
        if unknown:
            raise InvalidParameterError(
                f"Unknown configuration keys in {path}: {', '.join(sorted(unknown))}"
            )

        return cls(**data)

    def save_to_file(self, path: Path) -> None:
        """Save configuration to a YAML or JSON file.

        Args:
            path: Path where configuration should be saved.

        Raises:
            InvalidParameterError: If file format is not supported.
        """
        path = Path(path)
        if path.suffix not in ['.yaml', '.yml', '.json']:
            raise InvalidParameterError(
                f"Unsupported file format: {path.suffix}. Use .yaml, .yml, or .json"
            )
        path.parent.mkdir(parents=True, exist_ok=True)

        data = asdict(self)

        with open(path, 'w') as f:
            if path.suffix == '.json':
                json.dump(data, f, indent=2)
            else:
                yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def validate(self) -> bool:
        """Validate configuration parameters.

        Returns:
            True if configuration is valid.

        Raises:
            InvalidParameterError: If any configuration parameter is invalid.
        """
        if not isinstance(self.width, int) or self.width <= 0:
            raise InvalidParameterError("width must be a positive integer")

        if not isinstance(self.height, int) or self.height <= 0:
            raise InvalidParameterError("height must be a positive integer")

        if self.padding < 0:
            raise InvalidParameterError("padding must be non-negative")

        if self.padding_unit not in PADDING_UNITS:
            raise InvalidParameterError(
                f"padding_unit must be one of: {', '.join(PADDING_UNITS)}"
            )

        if self.projection not in PROJECTIONS:
            raise InvalidParameterError(
                f"projection must be one of: {', '.join(PROJECTIONS)}"
            )

        if self.dpi <= 0:
            raise InvalidParameterError("dpi must be positive")

        if not isinstance(self.background_color, str) or not self.background_color:
            raise InvalidParameterError("background_color must be a non-empty string")

        if self.blur is not None and self.blur < 0:
            raise InvalidParameterError("blur must be non-negative")

        return True


def get_default_config() -> Config:
    """
    Get a Config instance with default settings.

    Returns:
        Config instance initialized with default values.
    """
    return Config()
