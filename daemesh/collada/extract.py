# daemesh/collada/extract.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from daemesh.collada.document import (
    ColladaDocument,
    Geometry,
    Input,
    Source,
    SourceRole,
    TrianglesPrimitive,
)
from daemesh.collada.errors import GeometryError, malformed


@dataclass(frozen=True, slots=True, eq=False)
class GeometryLayout:
    """Everything the decoders need to walk one triangles primitive."""

    geometry_id: str
    position_source: Source
    normal_source: Optional[Source]
    p: np.ndarray
    position_offset: int
    normal_offset: Optional[int]
    stride: int

    @property
    def window_count(self) -> int:
        return int(self.p.shape[0]) // self.stride


def find_geometry(doc: ColladaDocument) -> Geometry:
    """First node of the default visual scene whose geometry instance resolves."""
    scene = doc.default_visual_scene()
    if scene is None:
        raise GeometryError("No visual scene found")

    for node in scene.nodes:
        if node.instance_geometry_url is None:
            continue
        geometry = doc.get_geometry(node.instance_geometry_url)
        if geometry is not None:
            return geometry

    raise GeometryError("No geometry found")


def index_stride(triangles: TrianglesPrimitive) -> int:
    if not triangles.inputs:
        return 1
    return max(inp.offset for inp in triangles.inputs) + 1


def _first_input(triangles: TrianglesPrimitive, semantic: str) -> Optional[Input]:
    for inp in triangles.inputs:
        if inp.semantic == semantic:
            return inp
    return None


def extract_layout(doc: ColladaDocument) -> GeometryLayout:
    """
    Locate the sources, offsets and index stride of the first triangles
    primitive of the first instanced geometry.

    Raises:
        GeometryError: when any required piece is missing.
    """
    geometry = find_geometry(doc)
    mesh = geometry.mesh

    if mesh.source_with_role(SourceRole.POSITION) is None:
        raise GeometryError("No position source found")
    if not mesh.triangles:
        raise GeometryError("No triangles found")
    triangles = mesh.triangles[0]

    for inp in triangles.inputs:
        if inp.offset < 0:
            raise malformed(f"{inp.semantic} input has negative offset {inp.offset}")

    vertex_input = _first_input(triangles, "VERTEX")
    position_input = _first_input(triangles, "POSITION")
    normal_input = _first_input(triangles, "NORMAL")
    bundled_normal = (
        mesh.vertices.input("NORMAL") if mesh.vertices is not None else None
    )

    if vertex_input is not None:
        position_offset = vertex_input.offset
        bundled_position = (
            mesh.vertices.input("POSITION") if mesh.vertices is not None else None
        )
        position_ref = bundled_position.source if bundled_position else None
        # <vertices> may bundle normals with positions under the VERTEX index
        if normal_input is None and bundled_normal is not None:
            normal_input = Input("NORMAL", vertex_input.offset, bundled_normal.source)
    elif position_input is not None:
        position_offset = position_input.offset
        position_ref = position_input.source
    else:
        raise GeometryError("No position input found")

    position_source = mesh.source(position_ref) if position_ref else None
    if position_source is None:
        raise GeometryError("No position source found")

    normal_source = None
    normal_offset = None
    if normal_input is not None:
        normal_source = mesh.source(normal_input.source)
        if normal_source is not None:
            normal_offset = normal_input.offset

    return GeometryLayout(
        geometry_id=geometry.id,
        position_source=position_source,
        normal_source=normal_source,
        p=triangles.p,
        position_offset=position_offset,
        normal_offset=normal_offset,
        stride=index_stride(triangles),
    )
