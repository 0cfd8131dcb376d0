# daemesh/collada/document.py
"""
Minimal COLLADA scene graph.

Only the parts the mesh decoder needs are read: visual scenes and their
nodes, geometries, float sources with accessor strides, <vertices> and the
<triangles> primitives. Every source is tagged with an explicit role derived
from the input semantics that reference it, so callers never have to guess
from identifiers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

import numpy as np
from lxml import etree

from daemesh.collada.errors import IoError, ParseError


class SourceRole(str, Enum):
    POSITION = "position"
    NORMAL = "normal"
    TEXCOORD = "texcoord"
    OTHER = "other"


_SEMANTIC_ROLES = {
    "POSITION": SourceRole.POSITION,
    "NORMAL": SourceRole.NORMAL,
    "TEXCOORD": SourceRole.TEXCOORD,
}

INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1


@dataclass(frozen=True, slots=True, eq=False)
class Source:
    """Flat float array plus the number of floats per logical element."""

    id: str
    values: np.ndarray  # float64, read-only
    stride: int
    role: SourceRole = SourceRole.OTHER

    def __len__(self) -> int:
        return int(self.values.shape[0])


@dataclass(frozen=True, slots=True)
class Input:
    semantic: str
    offset: int
    source: str  # id without the leading '#'


@dataclass(frozen=True, slots=True)
class Vertices:
    id: str
    inputs: Tuple[Input, ...]

    def input(self, semantic: str) -> Optional[Input]:
        for inp in self.inputs:
            if inp.semantic == semantic:
                return inp
        return None


@dataclass(frozen=True, slots=True, eq=False)
class TrianglesPrimitive:
    inputs: Tuple[Input, ...]
    p: np.ndarray  # int64, read-only


@dataclass(frozen=True, slots=True)
class MeshGeometry:
    sources: Tuple[Source, ...]
    triangles: Tuple[TrianglesPrimitive, ...]
    vertices: Optional[Vertices] = None

    def source(self, source_id: str) -> Optional[Source]:
        for src in self.sources:
            if src.id == source_id:
                return src
        return None

    def source_with_role(self, role: SourceRole) -> Optional[Source]:
        for src in self.sources:
            if src.role is role:
                return src
        return None


@dataclass(frozen=True, slots=True)
class Geometry:
    id: str
    name: Optional[str]
    mesh: MeshGeometry


@dataclass(frozen=True, slots=True)
class Node:
    id: Optional[str]
    name: Optional[str]
    instance_geometry_url: Optional[str] = None


@dataclass(frozen=True, slots=True)
class VisualScene:
    id: Optional[str]
    nodes: Tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class ColladaDocument:
    visual_scenes: Tuple[VisualScene, ...] = ()
    geometries: Dict[str, Geometry] = field(default_factory=dict)
    scene_url: Optional[str] = None

    @classmethod
    def from_bytes(cls, data: bytes) -> ColladaDocument:
        """
        Parse a complete COLLADA file held in memory.

        Raises:
            IoError: if the bytes are not valid UTF-8.
            ParseError: if the XML is malformed or is not a COLLADA document.
        """
        try:
            data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise IoError(f"COLLADA document is not valid UTF-8: {e}") from e

        parser = etree.XMLParser(
            resolve_entities=False,
            no_network=True,
            remove_comments=True,
            remove_pis=True,
            huge_tree=True,
        )
        try:
            root = etree.fromstring(data, parser=parser)
        except etree.XMLSyntaxError as e:
            raise ParseError(f"Failed to parse COLLADA XML: {e}") from e

        _strip_namespaces(root)
        if root.tag != "COLLADA":
            raise ParseError(f"Root element is <{root.tag}>, expected <COLLADA>")

        return cls._from_root(root)

    @classmethod
    def from_xml(cls, text: str) -> ColladaDocument:
        return cls.from_bytes(text.encode("utf-8"))

    @classmethod
    def _from_root(cls, root: etree._Element) -> ColladaDocument:
        geometries: Dict[str, Geometry] = {}
        for geom_el in root.iter("geometry"):
            geom_id = geom_el.get("id")
            mesh_el = geom_el.find("mesh")
            # <convex_mesh>, <spline> and friends carry nothing we can decode
            if geom_id is None or mesh_el is None:
                continue
            geometries.setdefault(
                geom_id,
                Geometry(
                    id=geom_id, name=geom_el.get("name"), mesh=_parse_mesh(mesh_el)
                ),
            )

        visual_scenes = tuple(
            VisualScene(
                id=vs_el.get("id"),
                nodes=tuple(_parse_node(n) for n in vs_el.iter("node")),
            )
            for vs_el in root.iter("visual_scene")
        )

        scene_url = None
        instance = root.find("scene/instance_visual_scene")
        if instance is not None:
            scene_url = instance.get("url")

        return cls(
            visual_scenes=visual_scenes, geometries=geometries, scene_url=scene_url
        )

    def default_visual_scene(self) -> Optional[VisualScene]:
        """The scene instanced by <scene>, or the first one declared."""
        if self.scene_url is not None:
            wanted = _strip_hash(self.scene_url)
            for vs in self.visual_scenes:
                if vs.id == wanted:
                    return vs
        return self.visual_scenes[0] if self.visual_scenes else None

    def get_geometry(self, url: str) -> Optional[Geometry]:
        return self.geometries.get(_strip_hash(url))


def _strip_hash(url: str) -> str:
    return url[1:] if url.startswith("#") else url


def _strip_namespaces(root: etree._Element) -> None:
    # COLLADA 1.4 and 1.5 use different namespaces; we only care about local names
    for el in root.iter():
        if isinstance(el.tag, str):
            el.tag = etree.QName(el).localname
    etree.cleanup_namespaces(root)


def _parse_node(node_el: etree._Element) -> Node:
    url = None
    inst = node_el.find("instance_geometry")
    if inst is not None:
        url = inst.get("url")
    return Node(id=node_el.get("id"), name=node_el.get("name"), instance_geometry_url=url)


def _parse_int(value: Optional[str], default: int, what: str) -> int:
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        raise ParseError(f"Invalid integer for {what}: {value!r}") from None
    if not INT64_MIN <= parsed <= INT64_MAX:
        raise ParseError(f"Integer for {what} is out of range: {value!r}")
    return parsed


def _parse_inputs(parent: etree._Element, shared: bool) -> Tuple[Input, ...]:
    inputs: List[Input] = []
    for inp in parent.findall("input"):
        semantic = inp.get("semantic")
        source = inp.get("source")
        if semantic is None or source is None:
            raise ParseError(f"<input> on <{parent.tag}> is missing semantic or source")

        offset = _parse_int(inp.get("offset"), 0, f"{semantic} offset") if shared else 0
        inputs.append(
            Input(
                semantic=semantic,
                offset=offset,
                source=_strip_hash(source),
            )
        )
    return tuple(inputs)


def _parse_floats(text: Optional[str], source_id: str) -> np.ndarray:
    try:
        values = np.array((text or "").split(), dtype=np.float64)
    except ValueError:
        raise ParseError(f"Source '{source_id}' has non-numeric float data") from None
    values.setflags(write=False)
    return values


def _parse_indices(text: Optional[str]) -> np.ndarray:
    try:
        p = np.array((text or "").split(), dtype=np.int64)
    except (ValueError, OverflowError):
        raise ParseError(
            "Triangle index list <p> has non-integer or out-of-range data"
        ) from None
    p.setflags(write=False)
    return p


def _parse_mesh(mesh_el: etree._Element) -> MeshGeometry:
    vertices = None
    vert_el = mesh_el.find("vertices")
    if vert_el is not None:
        vertices = Vertices(
            id=vert_el.get("id", ""), inputs=_parse_inputs(vert_el, shared=False)
        )

    triangles = tuple(
        TrianglesPrimitive(
            inputs=_parse_inputs(tri_el, shared=True),
            p=_parse_indices(tri_el.findtext("p")),
        )
        for tri_el in mesh_el.findall("triangles")
    )

    # First semantic to reference a source decides its role
    roles: Dict[str, SourceRole] = {}
    referencing = list(vertices.inputs) if vertices is not None else []
    for tri in triangles:
        referencing.extend(tri.inputs)
    for inp in referencing:
        role = _SEMANTIC_ROLES.get(inp.semantic)
        if role is not None:
            roles.setdefault(inp.source, role)

    sources: List[Source] = []
    for src_el in mesh_el.findall("source"):
        src_id = src_el.get("id", "")
        accessor = src_el.find("technique_common/accessor")
        stride = _parse_int(
            accessor.get("stride") if accessor is not None else None,
            1,
            f"accessor stride of '{src_id}'",
        )
        sources.append(
            Source(
                id=src_id,
                values=_parse_floats(src_el.findtext("float_array"), src_id),
                stride=stride,
                role=roles.get(src_id, SourceRole.OTHER),
            )
        )

    return MeshGeometry(sources=tuple(sources), triangles=triangles, vertices=vertices)
