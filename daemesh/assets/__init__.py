# daemesh/assets/__init__.py
from daemesh.assets.handle import AssetHandle, AssetId
from daemesh.assets.importers import AssetImporter, DaeImporter
from daemesh.assets.registry import AssetRegistry
from daemesh.assets.server import AssetServer
from daemesh.assets.settings import DaeImportSettings
from daemesh.types import IndexedMesh, MeshData, Topology, VertexLayout

__all__ = [
    "AssetServer",
    "AssetHandle",
    "AssetId",
    "AssetImporter",
    "AssetRegistry",
    "DaeImporter",
    "DaeImportSettings",
    "IndexedMesh",
    "MeshData",
    "Topology",
    "VertexLayout",
]
