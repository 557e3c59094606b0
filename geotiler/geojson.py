"""
Small helpers for GeoJSON-like mappings.

Features and collections are handled as plain dictionaries throughout the
package; these helpers normalise inputs and read/write GeoJSON files.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Union

from .exceptions import InvalidParameterError

logger = logging.getLogger("geotiler.geojson")

Features = Union[Mapping[str, Any], Iterable[Mapping[str, Any]]]


def feature_list(features: Features) -> List[Mapping[str, Any]]:
    """
    Normalise a FeatureCollection, a single Feature or an iterable of
    Features into a list of Features.
    """
    if isinstance(features, Mapping):
        if features.get("type") == "FeatureCollection":
            return list(features.get("features") or [])
        return [features]
    return list(features)


def feature_collection(features: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    return {"type": "FeatureCollection", "features": list(features)}


def load_geojson(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a GeoJSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        InvalidParameterError: If the file is not valid JSON
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"GeoJSON file not found: {path}")

    with open(path, 'r') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidParameterError(f"Invalid GeoJSON in {path}: {e}") from e

    logger.debug(f"Loaded {len(feature_list(data))} features from {path}")
    return data


def save_geojson(data: Mapping[str, Any], path: Union[str, Path]) -> str:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(data, f)

    logger.debug(f"Saved {len(feature_list(data))} features to {path}")
    return str(path)
