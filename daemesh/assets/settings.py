# daemesh/assets/settings.py
from __future__ import annotations

from dataclasses import dataclass

from daemesh.types import Topology


@dataclass(frozen=True, slots=True)
class DaeImportSettings:
    """How .dae files are turned into meshes."""

    # Topology produced when no label is requested
    topology: Topology = Topology.TRIANGLE_LIST
    generate_tangents: bool = True
