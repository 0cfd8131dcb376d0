# daemesh/collada/errors.py
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Which stage of a COLLADA load failed."""

    IO = "io"
    PARSE = "parse"
    GEOMETRY = "geometry"


class ColladaError(Exception):
    """Base class for every failure raised while loading a COLLADA file."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class IoError(ColladaError):
    """Bytes could not be read or are not valid UTF-8."""

    kind = ErrorKind.IO


class ParseError(ColladaError):
    """The document is not well-formed XML or carries malformed payloads."""

    kind = ErrorKind.PARSE


class GeometryError(ColladaError):
    """The document parsed, but no usable geometry could be decoded from it."""

    kind = ErrorKind.GEOMETRY


def malformed(detail: str) -> GeometryError:
    return GeometryError(f"Malformed data: {detail}")
