"""Error hierarchy for tiny-graphviz."""

from __future__ import annotations


class GraphError(Exception):
    """Base error for all graph errors."""


class EntityNotFoundError(GraphError, KeyError):
    """An identifier does not resolve to an entity of the expected kind."""

    def __init__(self, entity_id: int, kind: str = "entity"):
        super().__init__(entity_id, kind)
        self.entity_id = entity_id
        self.kind = kind

    def __str__(self) -> str:
        return f"No {self.kind} with id {self.entity_id}"


class InvalidTargetError(GraphError, TypeError):
    """Operation applied to an entity kind that does not support it."""

    def __init__(self, entity_id: int, kind: str, operation: str):
        super().__init__(entity_id, kind, operation)
        self.entity_id = entity_id
        self.kind = kind
        self.operation = operation

    def __str__(self) -> str:
        return f"Cannot {self.operation} {self.kind} {self.entity_id}"


class UnsupportedFormatError(GraphError, ValueError):
    """Requested output format is not one the dot tool is asked to produce."""


class RenderError(GraphError):
    """The external dot tool failed or could not be started."""

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        stderr: str = "",
    ):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr
