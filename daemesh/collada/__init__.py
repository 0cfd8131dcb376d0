from daemesh.collada.convert import (
    collada_to_mesh,
    collada_to_triangle_mesh,
    collada_to_wireframe_mesh,
    load_collada,
)
from daemesh.collada.document import ColladaDocument, Source, SourceRole
from daemesh.collada.errors import (
    ColladaError,
    ErrorKind,
    GeometryError,
    IoError,
    ParseError,
)

__all__ = [
    "ColladaDocument",
    "Source",
    "SourceRole",
    "ColladaError",
    "ErrorKind",
    "GeometryError",
    "IoError",
    "ParseError",
    "collada_to_mesh",
    "collada_to_triangle_mesh",
    "collada_to_wireframe_mesh",
    "load_collada",
]
