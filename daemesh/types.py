# daemesh/types.py
from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple, TypeAlias

import numpy as np

Scalar: TypeAlias = float

Vec2 = Tuple[Scalar, Scalar]
Vec3 = Tuple[Scalar, Scalar, Scalar]
AABB = Tuple[Vec3, Vec3]  # min, max


class Topology(str, Enum):
    """Primitive topology of an index buffer."""

    TRIANGLE_LIST = "triangle_list"
    LINE_LIST = "line_list"

    @property
    def indices_per_primitive(self) -> int:
        return 3 if self is Topology.TRIANGLE_LIST else 2


@dataclass(frozen=True, slots=True)
class VertexLayout:
    """Describes vertex attributes for VAO creation."""

    attributes: Sequence[str]  # e.g. ["in_pos", "in_normal", "in_uv"]
    format: str  # moderngl buffer format string e.g. "3f 3f 2f"
    stride_bytes: int  # e.g. 32


STANDARD_LAYOUT = VertexLayout(
    attributes=("in_pos", "in_normal", "in_uv"),
    format="3f 3f 2f",
    stride_bytes=struct.calcsize("<3f3f2f"),
)


@dataclass(frozen=True, slots=True)
class MeshData:
    """Interleaved mesh payload, ready for GPU upload."""

    vertices: bytes
    vertex_layout: VertexLayout
    aabb: AABB
    indices: Optional[bytes] = None
    index_count: int = 0
    index_element_size: int = 4  # bytes
    topology: Topology = Topology.TRIANGLE_LIST


def _frozen(array: np.ndarray, dtype, width: Optional[int]) -> np.ndarray:
    out = np.array(array, dtype=dtype)
    if width is not None:
        out = out.reshape(-1, width)
    out.setflags(write=False)
    return out


@dataclass(frozen=True, slots=True, eq=False)
class IndexedMesh:
    """
    Deduplicated vertex attributes plus an index buffer.

    positions, normals and uv0 always have the same number of rows. Arrays
    are copied and made read-only on construction.
    """

    topology: Topology
    positions: np.ndarray  # (V, 3) float32
    normals: np.ndarray  # (V, 3) float32
    uv0: np.ndarray  # (V, 2) float32
    indices: np.ndarray  # (N,) uint32
    tangents: Optional[np.ndarray] = None  # (V, 4) float32, w = handedness

    def __post_init__(self) -> None:
        object.__setattr__(self, "positions", _frozen(self.positions, np.float32, 3))
        object.__setattr__(self, "normals", _frozen(self.normals, np.float32, 3))
        object.__setattr__(self, "uv0", _frozen(self.uv0, np.float32, 2))
        object.__setattr__(self, "indices", _frozen(self.indices, np.uint32, None))
        if self.tangents is not None:
            object.__setattr__(self, "tangents", _frozen(self.tangents, np.float32, 4))

        count = self.positions.shape[0]
        if self.normals.shape[0] != count or self.uv0.shape[0] != count:
            raise ValueError(
                f"Attribute length mismatch: {count} positions, "
                f"{self.normals.shape[0]} normals, {self.uv0.shape[0]} uvs"
            )
        if self.tangents is not None and self.tangents.shape[0] != count:
            raise ValueError(
                f"{self.tangents.shape[0]} tangents for {count} vertices"
            )
        if self.indices.size and int(self.indices.max()) >= count:
            raise ValueError("Index buffer references a missing vertex")

    @property
    def vertex_count(self) -> int:
        return int(self.positions.shape[0])

    @property
    def index_count(self) -> int:
        return int(self.indices.shape[0])

    @property
    def primitive_count(self) -> int:
        return self.index_count // self.topology.indices_per_primitive

    @property
    def aabb(self) -> AABB:
        if not self.vertex_count:
            return (0.0, 0.0, 0.0), (0.0, 0.0, 0.0)
        lo = self.positions.min(axis=0)
        hi = self.positions.max(axis=0)
        return (
            (float(lo[0]), float(lo[1]), float(lo[2])),
            (float(hi[0]), float(hi[1]), float(hi[2])),
        )

    def to_mesh_data(self) -> MeshData:
        """Interleave as "3f 3f 2f" little-endian with u32 indices."""
        interleaved = np.hstack((self.positions, self.normals, self.uv0))
        return MeshData(
            vertices=interleaved.astype("<f4").tobytes(),
            vertex_layout=STANDARD_LAYOUT,
            aabb=self.aabb,
            indices=self.indices.astype("<u4").tobytes(),
            index_count=self.index_count,
            topology=self.topology,
        )
