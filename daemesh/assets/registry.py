# daemesh/assets/registry.py
from typing import Dict, Optional

from daemesh.assets.handle import AssetId
from daemesh.types import IndexedMesh


class AssetRegistry:
    """
    Decoded meshes and load failures, keyed by AssetId.

    An id holds either a mesh or the exception its load raised; storing one
    replaces the other so a reload can recover from an earlier failure.
    """

    def __init__(self) -> None:
        self._meshes: Dict[AssetId, IndexedMesh] = {}
        self._failures: Dict[AssetId, Exception] = {}

    def store(self, asset_id: AssetId, mesh: IndexedMesh) -> None:
        if not isinstance(mesh, IndexedMesh):
            raise TypeError(f"Expected IndexedMesh, got {type(mesh).__name__}")
        self._failures.pop(asset_id, None)
        self._meshes[asset_id] = mesh

    def store_error(self, asset_id: AssetId, error: Exception) -> None:
        self._meshes.pop(asset_id, None)
        self._failures[asset_id] = error

    def get(self, asset_id: AssetId) -> Optional[IndexedMesh]:
        """The decoded mesh, or None while pending or after a failure."""
        return self._meshes.get(asset_id)

    def error(self, asset_id: AssetId) -> Optional[Exception]:
        return self._failures.get(asset_id)

    def __contains__(self, asset_id: AssetId) -> bool:
        return asset_id in self._meshes
