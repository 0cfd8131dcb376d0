# daemesh/collada/convert.py
from __future__ import annotations

import logging

from daemesh.collada.assemble import assemble_triangle_mesh
from daemesh.collada.document import ColladaDocument
from daemesh.collada.extract import extract_layout
from daemesh.collada.weld import weld_vertices
from daemesh.collada.wireframe import extract_wireframe
from daemesh.types import IndexedMesh, Topology

logger = logging.getLogger(__name__)


def collada_to_triangle_mesh(
    doc: ColladaDocument, *, generate_tangents: bool = True
) -> IndexedMesh:
    layout = extract_layout(doc)
    mesh = assemble_triangle_mesh(
        weld_vertices(layout), with_tangents=generate_tangents
    )
    logger.debug(
        "Decoded '%s': %d vertices, %d triangles",
        layout.geometry_id,
        mesh.vertex_count,
        mesh.primitive_count,
    )
    return mesh


def collada_to_wireframe_mesh(doc: ColladaDocument) -> IndexedMesh:
    layout = extract_layout(doc)
    mesh = extract_wireframe(layout)
    logger.debug(
        "Decoded wireframe of '%s': %d vertices, %d edges",
        layout.geometry_id,
        mesh.vertex_count,
        mesh.primitive_count,
    )
    return mesh


def collada_to_mesh(
    doc: ColladaDocument,
    topology: Topology = Topology.TRIANGLE_LIST,
    *,
    generate_tangents: bool = True,
) -> IndexedMesh:
    """
    Decode the first instanced geometry of a document.

    Raises:
        GeometryError: if no usable geometry exists or its data is malformed.
    """
    if topology is Topology.LINE_LIST:
        return collada_to_wireframe_mesh(doc)
    return collada_to_triangle_mesh(doc, generate_tangents=generate_tangents)


def load_collada(
    data: bytes,
    topology: Topology = Topology.TRIANGLE_LIST,
    *,
    generate_tangents: bool = True,
) -> IndexedMesh:
    """Parse and decode a COLLADA file held in memory."""
    doc = ColladaDocument.from_bytes(data)
    return collada_to_mesh(doc, topology, generate_tangents=generate_tangents)
