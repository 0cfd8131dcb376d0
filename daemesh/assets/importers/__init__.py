from daemesh.assets.importers.base import AssetImporter
from daemesh.assets.importers.dae import DaeImporter

__all__ = ["AssetImporter", "DaeImporter"]
