"""
Street-network loading from JSON documents.

Document layout::

    {
      "name": "Albany Patrol Zone 1",
      "vertices": [{"id": 1, "label": "Main & 1st", "lat": 42.82, "lon": -73.89}, ...],
      "edges": [[1, 2], {"v1": 2, "v2": 3, "weight": 140.0}, ...]
    }

Vertices carry either ``lat``/``lon`` (geographic) or ``x``/``y`` (projected)
positions, which become the vertex payload. Edges without a weight get the
distance between their endpoints, rounded to 0.1 m.
"""

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .exceptions import GraphError, NetworkParseError
from .geo import haversine, planar_distance
from .graph import StreetGraph
from .logging_config import get_logger

logger = get_logger(__name__)

Position = Tuple[str, Tuple[float, float]]  # ("geo" | "planar", point)


def _vertex_position(raw: Mapping[str, Any]) -> Optional[Position]:
    if "lat" in raw and "lon" in raw:
        return "geo", (float(raw["lat"]), float(raw["lon"]))
    if "x" in raw and "y" in raw:
        return "planar", (float(raw["x"]), float(raw["y"]))
    return None


def _derived_weight(p1: Optional[Position], p2: Optional[Position], v1, v2) -> float:
    if p1 is None or p2 is None:
        raise ValueError(f"edge ({v1}, {v2}) has no weight and an endpoint has no position")
    if p1[0] != p2[0]:
        raise ValueError(f"edge ({v1}, {v2}) joins geographic and projected positions")
    if p1[0] == "geo":
        return round(haversine(p1[1], p2[1]), 1)
    return round(planar_distance(p1[1], p2[1]), 1)


def build_graph_from_dict(data: Mapping[str, Any], source: str = "<dict>", strict: bool = False) -> StreetGraph:
    """
    Build a StreetGraph from a parsed network document.

    Args:
        data: Parsed JSON document
        source: Name used in error messages (usually the file path)
        strict: Passed to StreetGraph (duplicate vertex ids raise)

    Raises:
        NetworkParseError: If the document is malformed or violates graph rules
    """
    if not isinstance(data, Mapping):
        raise NetworkParseError(source, "top-level JSON value must be an object")

    graph = StreetGraph(str(data.get("name", Path(source).stem)), strict=strict)
    positions: Dict[int, Optional[Position]] = {}

    try:
        for raw in data.get("vertices", []):
            vid = raw["id"]
            position = _vertex_position(raw)
            graph.add_vertex(vid, raw.get("label"), position[1] if position else None)
            positions.setdefault(vid, position)

        for raw in data.get("edges", []):
            if isinstance(raw, Mapping):
                v1, v2, weight = raw["v1"], raw["v2"], raw.get("weight")
            else:
                v1, v2 = raw[0], raw[1]
                weight = raw[2] if len(raw) > 2 else None

            if weight is None:
                weight = _derived_weight(positions.get(v1), positions.get(v2), v1, v2)
            graph.add_edge(v1, v2, weight)
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise NetworkParseError(source, f"{type(e).__name__}: {e}") from e
    except GraphError as e:
        raise NetworkParseError(source, str(e)) from e

    logger.info(f"Loaded network '{graph.name}': {graph.vertex_count} vertices, {graph.edge_count} edges")
    return graph


def load_network(path: Union[str, Path], strict: bool = False) -> StreetGraph:
    """
    Load a street network from a JSON file.

    Raises:
        NetworkParseError: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        # ValueError covers JSONDecodeError and UnicodeDecodeError
        raise NetworkParseError(str(path), str(e)) from e

    return build_graph_from_dict(data, source=str(path), strict=strict)
