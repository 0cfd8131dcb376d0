# daemesh/assets/handle.py
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Generic, NewType, Optional, TypeVar

AssetId = NewType("AssetId", int)  # 64-bit integer GUID
T = TypeVar("T")  # Type of data (IndexedMesh, ...)


def asset_id_for(path: str) -> AssetId:
    return AssetId(int(hashlib.sha256(path.encode()).hexdigest(), 16) % (10**16))


@dataclass(frozen=True)
class AssetHandle(Generic[T]):
    """
    Lightweight reference to an asset.
    Holding this does not guarantee that the asset is loaded.
    """

    id: AssetId
    path: str  # as requested, including any "#label"

    @property
    def file_path(self) -> str:
        return self.path.partition("#")[0]

    @property
    def label(self) -> Optional[str]:
        _, sep, label = self.path.partition("#")
        return label if sep else None
