from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TaskGraphError(Exception):
    """Base error envelope. Validators return these; loaders and the engine raise them."""

    code: str
    message: str
    file: Optional[str] = None
    path: Optional[str] = None

    def __str__(self) -> str:
        parts: list[str] = []
        if self.file:
            parts.append(self.file)
        if self.path:
            parts.append(self.path)
        loc = ":".join(parts) if parts else "<graph>"
        return f"{loc}: {self.code}: {self.message}"


class TaskLoadError(TaskGraphError):
    pass


class TaskValidationError(TaskGraphError):
    pass


class InvalidVertexError(TaskGraphError):
    pass


class EmptyGraphError(TaskGraphError):
    pass


class UnsupportedGraphError(TaskGraphError):
    pass


def invalid_vertex(vertex: int, vertex_count: int, *, path: Optional[str] = None) -> InvalidVertexError:
    return InvalidVertexError(
        code="E_INVALID_VERTEX",
        message=f"vertex {vertex} is outside [0, {vertex_count})",
        path=path,
    )
