# daemesh/collada/assemble.py
from __future__ import annotations

import logging

import numpy as np

from daemesh.collada.weld import WeldResult
from daemesh.math import TangentError, generate_tangents
from daemesh.types import IndexedMesh, Topology

logger = logging.getLogger(__name__)

DEFAULT_UV = (0.0, 0.0)


def assemble_triangle_mesh(
    welded: WeldResult, *, with_tangents: bool = True
) -> IndexedMesh:
    """
    Finish a welded triangle list.

    UVs are not decoded from the document; every vertex gets (0, 0).
    Tangent generation is best effort and is dropped silently on failure.
    """
    uv0 = np.tile(np.array(DEFAULT_UV, dtype=np.float32), (welded.vertex_count, 1))

    tangents = None
    if with_tangents:
        try:
            tangents = generate_tangents(
                welded.positions, welded.normals, uv0, welded.indices
            )
        except TangentError as e:
            logger.debug("Skipping tangents: %s", e)

    return IndexedMesh(
        topology=Topology.TRIANGLE_LIST,
        positions=welded.positions,
        normals=welded.normals,
        uv0=uv0,
        indices=welded.indices,
        tangents=tangents,
    )
