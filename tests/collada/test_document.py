import pytest

from daemesh.collada.document import ColladaDocument, SourceRole
from daemesh.collada.errors import ErrorKind, IoError, ParseError

TRIANGLE = [0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0, 0.0]


def test_parses_geometry_and_scene(collada_doc):
    doc = collada_doc(TRIANGLE, [0, 1, 2])

    scene = doc.default_visual_scene()
    assert scene is not None
    assert [n.id for n in scene.nodes] == ["Camera", "Geom"]
    assert scene.nodes[0].instance_geometry_url is None
    assert scene.nodes[1].instance_geometry_url == "#geom"

    geometry = doc.get_geometry("#geom")
    assert geometry is not None
    assert geometry.name == "Geom"
    assert doc.get_geometry("geom") is geometry

    source = geometry.mesh.sources[0]
    assert source.stride == 3
    assert source.values.tolist() == TRIANGLE
    assert not source.values.flags.writeable

    tri = geometry.mesh.triangles[0]
    assert tri.p.tolist() == [0, 1, 2]
    assert [(i.semantic, i.offset) for i in tri.inputs] == [("VERTEX", 0)]


def test_parses_without_namespace(collada_doc):
    doc = collada_doc(TRIANGLE, [0, 1, 2], namespace=None)
    assert doc.get_geometry("#geom") is not None


def test_parses_collada_15_namespace(collada_doc):
    doc = collada_doc(
        TRIANGLE, [0, 1, 2], namespace="http://www.collada.org/2008/03/COLLADASchema"
    )
    assert doc.get_geometry("#geom") is not None


def test_roles_come_from_semantics_not_ids(collada_doc):
    doc = collada_doc(
        TRIANGLE,
        [0, 0, 1, 0, 2, 0],
        inputs=(("VERTEX", 0), ("NORMAL", 1)),
        normals=[0.0, 0.0, 1.0],
        position_id="alpha",
        normal_id="beta",
    )
    mesh = doc.get_geometry("#geom").mesh

    assert mesh.source("alpha").role is SourceRole.POSITION
    assert mesh.source("beta").role is SourceRole.NORMAL


def test_unreferenced_source_is_other(collada_doc):
    # Named like a normal source, but nothing reads it
    doc = collada_doc(TRIANGLE, [0, 1, 2], normals=[0.0, 0.0, 1.0])
    mesh = doc.get_geometry("#geom").mesh

    assert mesh.source("geom-normals").role is SourceRole.OTHER
    assert mesh.source_with_role(SourceRole.NORMAL) is None


def test_invalid_utf8_is_io_error():
    with pytest.raises(IoError) as exc:
        ColladaDocument.from_bytes(b"<COLLADA>\xff\xfe</COLLADA>")

    assert exc.value.kind is ErrorKind.IO


def test_malformed_xml_is_parse_error():
    with pytest.raises(ParseError, match="Failed to parse COLLADA XML") as exc:
        ColladaDocument.from_xml("<COLLADA><library_geometries></COLLADA>")

    assert exc.value.kind is ErrorKind.PARSE


def test_wrong_root_is_parse_error():
    with pytest.raises(ParseError, match="expected <COLLADA>"):
        ColladaDocument.from_xml("<scene/>")


def test_non_numeric_float_array_is_parse_error():
    xml = """
    <COLLADA><library_geometries><geometry id="g"><mesh>
      <source id="pos"><float_array>0 1 banana</float_array></source>
    </mesh></geometry></library_geometries></COLLADA>
    """
    with pytest.raises(ParseError, match="non-numeric"):
        ColladaDocument.from_xml(xml)


def test_non_integer_indices_are_parse_error():
    xml = """
    <COLLADA><library_geometries><geometry id="g"><mesh>
      <triangles count="1"><input semantic="VERTEX" source="#v" offset="0"/>
        <p>0 1 two</p></triangles>
    </mesh></geometry></library_geometries></COLLADA>
    """
    with pytest.raises(ParseError, match="non-integer"):
        ColladaDocument.from_xml(xml)


def test_out_of_range_indices_are_parse_error():
    xml = """
    <COLLADA><library_geometries><geometry id="g"><mesh>
      <triangles count="1"><input semantic="VERTEX" source="#v" offset="0"/>
        <p>0 1 99999999999999999999</p></triangles>
    </mesh></geometry></library_geometries></COLLADA>
    """
    with pytest.raises(ParseError, match="out-of-range"):
        ColladaDocument.from_xml(xml)


@pytest.mark.parametrize(
    "attrs",
    [
        '<input semantic="VERTEX" source="#v" offset="9223372036854775808"/>',
        '<input semantic="VERTEX" source="#v" offset="-9223372036854775809"/>',
    ],
)
def test_out_of_range_offset_is_parse_error(attrs):
    xml = f"""
    <COLLADA><library_geometries><geometry id="g"><mesh>
      <triangles count="1">{attrs}<p>0 1 2</p></triangles>
    </mesh></geometry></library_geometries></COLLADA>
    """
    with pytest.raises(ParseError, match="out of range"):
        ColladaDocument.from_xml(xml)


def test_out_of_range_accessor_stride_is_parse_error():
    xml = """
    <COLLADA><library_geometries><geometry id="g"><mesh>
      <source id="pos"><float_array>0 1 2</float_array>
        <technique_common><accessor stride="99999999999999999999"/></technique_common>
      </source>
    </mesh></geometry></library_geometries></COLLADA>
    """
    with pytest.raises(ParseError, match="out of range"):
        ColladaDocument.from_xml(xml)


def test_accessor_stride_defaults_to_one():
    xml = """
    <COLLADA><library_geometries><geometry id="g"><mesh>
      <source id="pos"><float_array>0 1 2</float_array></source>
    </mesh></geometry></library_geometries></COLLADA>
    """
    doc = ColladaDocument.from_xml(xml)
    assert doc.get_geometry("g").mesh.sources[0].stride == 1


def test_geometry_without_mesh_is_ignored():
    xml = """
    <COLLADA><library_geometries>
      <geometry id="spline"><spline/></geometry>
    </library_geometries></COLLADA>
    """
    doc = ColladaDocument.from_xml(xml)
    assert doc.get_geometry("#spline") is None


def test_default_scene_follows_instance_visual_scene():
    xml = """
    <COLLADA>
      <library_visual_scenes>
        <visual_scene id="First"/>
        <visual_scene id="Second"><node id="n"/></visual_scene>
      </library_visual_scenes>
      <scene><instance_visual_scene url="#Second"/></scene>
    </COLLADA>
    """
    doc = ColladaDocument.from_xml(xml)
    assert doc.default_visual_scene().id == "Second"


def test_default_scene_falls_back_to_first():
    xml = """
    <COLLADA><library_visual_scenes>
      <visual_scene id="First"/><visual_scene id="Second"/>
    </library_visual_scenes></COLLADA>
    """
    doc = ColladaDocument.from_xml(xml)
    assert doc.default_visual_scene().id == "First"


def test_no_visual_scene():
    doc = ColladaDocument.from_xml("<COLLADA/>")
    assert doc.default_visual_scene() is None


def test_nested_nodes_are_listed_in_document_order():
    xml = """
    <COLLADA><library_visual_scenes><visual_scene id="S">
      <node id="root">
        <node id="child"><instance_geometry url="#g"/></node>
      </node>
      <node id="sibling"/>
    </visual_scene></library_visual_scenes></COLLADA>
    """
    scene = ColladaDocument.from_xml(xml).default_visual_scene()

    assert [n.id for n in scene.nodes] == ["root", "child", "sibling"]
    assert scene.nodes[1].instance_geometry_url == "#g"
