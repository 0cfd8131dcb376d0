# daemesh/math.py
from __future__ import annotations

import numpy as np

# Below this a UV-space triangle or an orthogonalized tangent counts as empty
EPSILON = 1e-8


class TangentError(ValueError):
    """Tangents cannot be derived from the given attributes."""


def _dot_rows(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return np.einsum("ij,ij->i", a, b)


def generate_tangents(
    positions: np.ndarray,
    normals: np.ndarray,
    uvs: np.ndarray,
    indices: np.ndarray,
) -> np.ndarray:
    """
    Per-vertex tangents for a triangle list.

    Each triangle's UV gradient is accumulated onto its three corners, then
    the sum is Gram-Schmidt orthogonalized against the vertex normal. The w
    component carries bitangent handedness (+1 or -1).

    Returns:
        (V, 4) float32 array.

    Raises:
        TangentError: if the mesh has no triangles, every triangle is
            degenerate in UV space, or any vertex ends up with no tangent.
    """
    positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    normals = np.asarray(normals, dtype=np.float64).reshape(-1, 3)
    uvs = np.asarray(uvs, dtype=np.float64).reshape(-1, 2)
    indices = np.asarray(indices, dtype=np.int64).ravel()

    vertex_count = positions.shape[0]
    if normals.shape[0] != vertex_count or uvs.shape[0] != vertex_count:
        raise TangentError("positions, normals and uvs differ in length")
    if indices.size == 0 or indices.size % 3:
        raise TangentError(f"{indices.size} indices do not form a triangle list")
    if indices.min() < 0 or indices.max() >= vertex_count:
        raise TangentError("index buffer references a missing vertex")

    tris = indices.reshape(-1, 3)
    p0, p1, p2 = (positions[tris[:, k]] for k in range(3))
    w0, w1, w2 = (uvs[tris[:, k]] for k in range(3))

    e1 = p1 - p0
    e2 = p2 - p0
    d1 = w1 - w0
    d2 = w2 - w0

    det = d1[:, 0] * d2[:, 1] - d2[:, 0] * d1[:, 1]
    usable = np.abs(det) > EPSILON
    if not usable.any():
        raise TangentError("every triangle is degenerate in UV space")

    r = np.zeros_like(det)
    r[usable] = 1.0 / det[usable]

    sdir = (e1 * d2[:, 1:2] - e2 * d1[:, 1:2]) * r[:, None]
    tdir = (e2 * d1[:, 0:1] - e1 * d2[:, 0:1]) * r[:, None]

    tan1 = np.zeros((vertex_count, 3))
    tan2 = np.zeros((vertex_count, 3))
    for k in range(3):
        np.add.at(tan1, tris[:, k], sdir)
        np.add.at(tan2, tris[:, k], tdir)

    tangent = tan1 - normals * _dot_rows(normals, tan1)[:, None]
    length = np.linalg.norm(tangent, axis=1)
    missing = int(np.count_nonzero(length < EPSILON))
    if missing:
        raise TangentError(f"{missing} vertices have no usable tangent")
    tangent /= length[:, None]

    handedness = np.where(
        _dot_rows(np.cross(normals, tangent), tan2) < 0.0, -1.0, 1.0
    )
    return np.hstack((tangent, handedness[:, None])).astype(np.float32)
