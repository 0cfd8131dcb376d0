# daemesh/collada/wireframe.py
"""
Line-list rendition of a COLLADA geometry.

The vertex pool comes straight from the raw position source, so positions
no triangle references still get an entry. Triangle edges are then looked
up in that pool by VertexKey.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

import numpy as np

from daemesh.collada.errors import malformed
from daemesh.collada.extract import GeometryLayout
from daemesh.collada.weld import (
    VertexKey,
    gather_vec3,
    index_windows,
    quantize,
    window_column,
)
from daemesh.types import IndexedMesh, Topology

logger = logging.getLogger(__name__)

WIREFRAME_NORMAL = (1.0, 0.0, 0.0)
WIREFRAME_UV = (0.0, 0.0)


def pool_positions(
    layout: GeometryLayout,
) -> Tuple[np.ndarray, Dict[VertexKey, int]]:
    """Unique raw positions of the whole source, in source order."""
    source = layout.position_source
    if source.stride < 3:
        raise malformed(
            f"position source '{source.id}' stride {source.stride} "
            "is smaller than 3 components"
        )

    element_count = len(source) // source.stride
    raw = gather_vec3(source, np.arange(element_count), "position")

    pool: Dict[VertexKey, int] = {}
    firsts: List[int] = []
    for i, key in enumerate(map(tuple, quantize(raw).tolist())):
        if key not in pool:
            pool[key] = len(firsts)
            firsts.append(i)

    return raw[np.asarray(firsts, dtype=np.int64)], pool


def extract_wireframe(layout: GeometryLayout) -> IndexedMesh:
    positions, pool = pool_positions(layout)

    windows = index_windows(layout.p, layout.stride)
    if layout.p.shape[0] % (layout.stride * 3):
        raise malformed(
            f"index count {layout.p.shape[0]} does not split into triangles "
            f"of stride {layout.stride}"
        )
    corners = gather_vec3(
        layout.position_source,
        window_column(windows, layout.position_offset, "position"),
        "position",
    )
    corner_keys = quantize(corners).reshape(-1, 3, 3).tolist()

    lines: List[int] = []
    skipped = 0
    for k0, k1, k2 in corner_keys:
        v0 = pool.get(tuple(k0))
        v1 = pool.get(tuple(k1))
        v2 = pool.get(tuple(k2))
        if v0 is None or v1 is None or v2 is None:
            skipped += 1
            continue
        lines.extend((v0, v1, v1, v2, v2, v0))

    if skipped:
        logger.debug(
            "Skipped %d triangles of '%s' with unpooled corners",
            skipped,
            layout.geometry_id,
        )

    count = positions.shape[0]
    return IndexedMesh(
        topology=Topology.LINE_LIST,
        positions=positions,
        normals=np.tile(np.array(WIREFRAME_NORMAL, dtype=np.float32), (count, 1)),
        uv0=np.tile(np.array(WIREFRAME_UV, dtype=np.float32), (count, 1)),
        indices=np.asarray(lines, dtype=np.uint32),
    )
