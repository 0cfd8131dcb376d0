# daemesh/assets/server.py
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from queue import Empty, Queue
from typing import Dict, Iterable, List, Optional

from daemesh.assets.handle import AssetHandle, AssetId, asset_id_for
from daemesh.assets.importers.base import AssetImporter
from daemesh.assets.importers.dae import DaeImporter
from daemesh.assets.registry import AssetRegistry
from daemesh.types import IndexedMesh

logger = logging.getLogger(__name__)


class AssetServer:
    def __init__(
        self,
        asset_root: Path,
        importers: Optional[Iterable[AssetImporter]] = None,
        max_workers: int = 2,
    ) -> None:
        self.root = Path(asset_root)
        self.registry = AssetRegistry()

        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="AssetWorker"
        )
        # (asset_id, data, error) from workers; drained on the main thread
        self._loaded_queue: Queue = Queue()

        self._handles: Dict[str, AssetHandle] = {}  # Path -> Handle

        self._importers: Dict[str, AssetImporter] = {}
        for importer in importers if importers is not None else (DaeImporter(),):
            self.register_importer(importer)

    def register_importer(self, importer: AssetImporter) -> None:
        for ext in importer.extensions:
            self._importers[ext.lower()] = importer

    def importer_for(self, path: str) -> Optional[AssetImporter]:
        return self._importers.get(Path(path).suffix.lower())

    def load(self, path: str) -> AssetHandle:
        """
        Non-blocking load request. Return handle instantly.
        `path` may carry a sub-asset label: "models/joint.dae#wireframe".
        """
        if path in self._handles:
            return self._handles[path]

        handle = AssetHandle(asset_id_for(path), path)
        self._handles[path] = handle

        self._executor.submit(
            self._worker_load, handle.id, self.root / handle.file_path, handle.label
        )

        return handle

    def _worker_load(
        self, asset_id: AssetId, full_path: Path, label: Optional[str]
    ) -> None:
        """
        Load asset on background thread.
        """
        try:
            ext = full_path.suffix.lower()
            importer = self._importers.get(ext)
            if not importer:
                raise ValueError(f"No importer for {ext}")

            data = importer.import_file(full_path, label)
        except Exception as e:
            logger.exception("Failed to load %s", full_path)
            self._loaded_queue.put((asset_id, None, e))
            return

        logger.debug("Loaded %s", full_path)
        self._loaded_queue.put((asset_id, data, None))

    def update(self) -> List[AssetId]:
        """
        Called on the Main Thread every frame.
        Return list of newly loaded AssetIds (so Renderer can upload them).
        """
        loaded_ids = []
        while True:
            try:
                asset_id, data, error = self._loaded_queue.get_nowait()
            except Empty:
                break

            if error is not None:
                self.registry.store_error(asset_id, error)
                continue

            self.registry.store(asset_id, data)
            loaded_ids.append(asset_id)

        return loaded_ids

    def get(self, handle: AssetHandle) -> Optional[IndexedMesh]:
        """
        The mesh behind a handle once `update()` has picked it up, None while
        the load is still pending. A failed load re-raises its error.
        """
        error = self.registry.error(handle.id)
        if error is not None:
            raise error
        return self.registry.get(handle.id)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
