# daemesh/assets/importers/base.py
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Tuple


class AssetImporter(ABC):
    # File suffixes (lowercase, with the dot) this importer handles
    extensions: Tuple[str, ...] = ()

    @abstractmethod
    def import_file(self, path: Path, label: Optional[str] = None) -> Any:
        """
        Read file from disk and return a CPU-friendly data object.
        `label` selects a sub-asset ("model.dae#wireframe").
        Must be thread-safe.
        """
        pass
