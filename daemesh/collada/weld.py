# daemesh/collada/weld.py
"""
Vertex welding for COLLADA index blocks.

A triangles primitive stores one tuple of `stride` indices per corner; each
attribute reads its own slot of the tuple and scales it by its source's
accessor stride to reach the raw floats. Corners whose positions quantize to
the same VertexKey share one output vertex, and the first corner seen in
scan order decides that vertex's attributes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np

from daemesh.collada.document import Source
from daemesh.collada.errors import malformed
from daemesh.collada.extract import GeometryLayout

logger = logging.getLogger(__name__)

# One key unit per 0.001 model-space units on each axis
WELD_SCALE = 1000.0

DEFAULT_NORMAL = (0.0, 1.0, 0.0)

VertexKey = Tuple[int, int, int]


@dataclass(frozen=True, slots=True, eq=False)
class WeldResult:
    positions: np.ndarray  # (V, 3) float32
    normals: np.ndarray  # (V, 3) float32
    indices: np.ndarray  # (N,) uint32

    @property
    def vertex_count(self) -> int:
        return int(self.positions.shape[0])


def quantize(positions: np.ndarray) -> np.ndarray:
    """VertexKeys for an (N, 3) array. Halves round away from zero."""
    scaled = (positions.astype(np.float32) * np.float32(WELD_SCALE)).astype(
        np.float64
    )
    return (np.sign(scaled) * np.floor(np.abs(scaled) + 0.5)).astype(np.int64)


def vertex_key(position) -> VertexKey:
    x, y, z = quantize(np.asarray(position, dtype=np.float32).reshape(1, 3))[0]
    return int(x), int(y), int(z)


def index_windows(p: np.ndarray, stride: int) -> np.ndarray:
    """Split a flat index block into one row per corner."""
    if stride < 1:
        raise malformed(f"index stride {stride} is not positive")
    if p.shape[0] % stride:
        raise malformed(
            f"index count {p.shape[0]} is not a multiple of stride {stride}"
        )
    return p.reshape(-1, stride)


def window_column(windows: np.ndarray, offset: int, what: str) -> np.ndarray:
    if not 0 <= offset < windows.shape[1]:
        raise malformed(
            f"{what} offset {offset} is outside the index stride {windows.shape[1]}"
        )
    return windows[:, offset]


def gather_vec3(source: Source, elements: np.ndarray, what: str) -> np.ndarray:
    """
    Read 3 floats per element index from a source.

    Every read is validated up front; nothing is indexed until the whole
    batch is known to be in range.
    """
    if source.stride < 3:
        raise malformed(
            f"{what} source '{source.id}' stride {source.stride} "
            "is smaller than 3 components"
        )

    # highest element whose 3 floats still fit, checked before scaling by stride
    last = (len(source) - 3) // source.stride if len(source) >= 3 else -1
    elements = elements.astype(np.int64)
    if elements.size and (elements.min() < 0 or elements.max() > last):
        raise malformed(
            f"{what} index out of range for source '{source.id}' "
            f"({len(source)} floats)"
        )

    base = elements * source.stride
    return source.values[base[:, None] + np.arange(3)].astype(np.float32)


def weld_vertices(layout: GeometryLayout) -> WeldResult:
    windows = index_windows(layout.p, layout.stride)
    raw_positions = gather_vec3(
        layout.position_source,
        window_column(windows, layout.position_offset, "position"),
        "position",
    )
    keys = quantize(raw_positions)

    lookup: Dict[VertexKey, int] = {}
    first_windows: List[int] = []
    indices = np.empty(windows.shape[0], dtype=np.uint32)

    for w, key in enumerate(map(tuple, keys.tolist())):
        index = lookup.get(key)
        if index is None:
            index = len(first_windows)
            lookup[key] = index
            first_windows.append(w)
        indices[w] = index

    firsts = np.asarray(first_windows, dtype=np.int64)
    positions = raw_positions[firsts]

    if layout.normal_offset is not None and layout.normal_source is not None:
        normal_elements = window_column(windows, layout.normal_offset, "normal")
        normals = gather_vec3(layout.normal_source, normal_elements[firsts], "normal")
    else:
        normals = np.tile(np.array(DEFAULT_NORMAL, dtype=np.float32), (len(firsts), 1))

    logger.debug(
        "Welded %d corners of '%s' into %d vertices",
        windows.shape[0],
        layout.geometry_id,
        len(firsts),
    )
    return WeldResult(positions=positions, normals=normals, indices=indices)
