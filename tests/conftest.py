from typing import Iterable, Optional, Sequence, Tuple

import pytest

from daemesh.collada.document import ColladaDocument

COLLADA_NS = "http://www.collada.org/2005/11/COLLADASchema"

# Corner positions of a single right triangle in the XY plane
TRIANGLE = [0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0, 0.0]


def _source(source_id: str, values: Sequence[float], stride: int) -> str:
    floats = " ".join(repr(float(v)) for v in values)
    return (
        f'<source id="{source_id}">'
        f'<float_array id="{source_id}-array" count="{len(values)}">{floats}</float_array>'
        "<technique_common>"
        f'<accessor source="#{source_id}-array" count="{len(values) // max(stride, 1)}" '
        f'stride="{stride}"/>'
        "</technique_common>"
        "</source>"
    )


def build_collada(
    positions: Sequence[float],
    p: Iterable[int],
    *,
    inputs: Sequence[Tuple[str, int]] = (("VERTEX", 0),),
    position_stride: int = 3,
    normals: Optional[Sequence[float]] = None,
    normal_stride: int = 3,
    position_id: str = "geom-positions",
    normal_id: str = "geom-normals",
    vertices_inputs: Sequence[str] = ("POSITION",),
    triangles: bool = True,
    scene: bool = True,
    geometry_url: str = "#geom",
    namespace: Optional[str] = COLLADA_NS,
) -> str:
    """A one-geometry COLLADA document as text."""
    p = list(p)
    source_for = {
        "VERTEX": "#geom-vertices",
        "POSITION": f"#{position_id}",
        "NORMAL": f"#{normal_id}",
        "TEXCOORD": "#geom-uvs",
    }

    sources = _source(position_id, positions, position_stride)
    if normals is not None:
        sources += _source(normal_id, normals, normal_stride)

    vert_inputs = "".join(
        f'<input semantic="{s}" source="{source_for[s]}"/>' for s in vertices_inputs
    )

    tris = ""
    if triangles:
        stride = max((o for _, o in inputs), default=0) + 1
        tri_inputs = "".join(
            f'<input semantic="{s}" source="{source_for[s]}" offset="{o}"/>'
            for s, o in inputs
        )
        tris = (
            f'<triangles count="{len(p) // max(stride * 3, 1)}">{tri_inputs}'
            f"<p>{' '.join(str(i) for i in p)}</p></triangles>"
        )

    visual = ""
    if scene:
        visual = (
            "<library_visual_scenes>"
            '<visual_scene id="Scene" name="Scene">'
            '<node id="Camera" name="Camera"/>'
            '<node id="Geom" name="Geom">'
            f'<instance_geometry url="{geometry_url}"/>'
            "</node>"
            "</visual_scene>"
            "</library_visual_scenes>"
            '<scene><instance_visual_scene url="#Scene"/></scene>'
        )

    xmlns = f' xmlns="{namespace}"' if namespace else ""
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        f'<COLLADA{xmlns} version="1.4.1">'
        "<library_geometries>"
        '<geometry id="geom" name="Geom"><mesh>'
        f"{sources}"
        f'<vertices id="geom-vertices">{vert_inputs}</vertices>'
        f"{tris}"
        "</mesh></geometry>"
        "</library_geometries>"
        f"{visual}"
        "</COLLADA>"
    )


@pytest.fixture
def collada_xml():
    """Factory for COLLADA document text."""
    return build_collada


@pytest.fixture
def collada_doc():
    """Factory for parsed COLLADA documents."""

    def make(*args, **kwargs) -> ColladaDocument:
        return ColladaDocument.from_xml(build_collada(*args, **kwargs))

    return make


@pytest.fixture
def triangle_dae(tmp_path):
    """A single triangle with a face normal, written to disk."""
    f = tmp_path / "triangle.dae"
    f.write_text(
        build_collada(
            TRIANGLE,
            [0, 0, 1, 0, 2, 0],
            inputs=(("VERTEX", 0), ("NORMAL", 1)),
            normals=[0.0, 0.0, 1.0],
        ),
        encoding="utf-8",
    )
    return f


@pytest.fixture
def split_normals_doc():
    """
    <vertices> bundles one normal source while the primitive indexes another.
    Both are tagged NORMAL, so only the input references tell them apart.
    """
    return ColladaDocument.from_xml(
        """
        <COLLADA>
          <library_geometries>
            <geometry id="g"><mesh>
              <source id="vn"><float_array>0 0 -1 0 0 -1 0 0 -1</float_array>
                <technique_common><accessor stride="3"/></technique_common></source>
              <source id="tn"><float_array>0 0 1</float_array>
                <technique_common><accessor stride="3"/></technique_common></source>
              <source id="pos"><float_array>0 0 0 1 0 0 0 1 0</float_array>
                <technique_common><accessor stride="3"/></technique_common></source>
              <vertices id="v">
                <input semantic="POSITION" source="#pos"/>
                <input semantic="NORMAL" source="#vn"/>
              </vertices>
              <triangles count="1">
                <input semantic="VERTEX" source="#v" offset="0"/>
                <input semantic="NORMAL" source="#tn" offset="1"/>
                <p>0 0 1 0 2 0</p>
              </triangles>
            </mesh></geometry>
          </library_geometries>
          <library_visual_scenes><visual_scene id="S">
            <node id="n"><instance_geometry url="#g"/></node>
          </visual_scene></library_visual_scenes>
        </COLLADA>
        """
    )
