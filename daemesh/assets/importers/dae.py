# daemesh/assets/importers/dae.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

from daemesh.assets.importers.base import AssetImporter
from daemesh.assets.settings import DaeImportSettings
from daemesh.collada.convert import load_collada
from daemesh.collada.errors import IoError
from daemesh.types import IndexedMesh, Topology

WIREFRAME_LABEL = "wireframe"


class DaeImporter(AssetImporter):
    extensions = (".dae",)

    def __init__(self, settings: Optional[DaeImportSettings] = None) -> None:
        self.settings = settings or DaeImportSettings()

    def import_file(self, path: Path, label: Optional[str] = None) -> IndexedMesh:
        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as e:
            raise IoError(f"Failed to load COLLADA file {path}: {e}") from e

        return self.import_bytes(data, label)

    def import_bytes(self, data: bytes, label: Optional[str] = None) -> IndexedMesh:
        return load_collada(
            data,
            self._topology_for(label),
            generate_tangents=self.settings.generate_tangents,
        )

    def _topology_for(self, label: Optional[str]) -> Topology:
        if label is None:
            return self.settings.topology
        if label == WIREFRAME_LABEL:
            return Topology.LINE_LIST
        raise ValueError(f"Unknown COLLADA sub-asset label: {label!r}")
