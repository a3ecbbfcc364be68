"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Entity / query input
  2xxx: Cache layer
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Entity / query input ---

class EntityNotFoundError(AppError):
    def __init__(self, entity_type: str, entity_id: str) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(1001, f"{entity_type} not found: {entity_id}", 404)


class InvalidEntityFieldsError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1002, f"Invalid fields: {detail}", 400)


class InvalidQueryError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1003, f"Invalid query: {detail}", 400)


class DuplicateEntityError(AppError):
    def __init__(self, entity_type: str) -> None:
        super().__init__(1004, f"{entity_type} violates a uniqueness constraint", 409)


# --- 2xxx: Cache layer ---

class InvalidShapeError(AppError):
    """A query shape could not be fingerprinted into a cache key."""

    def __init__(self, detail: str) -> None:
        super().__init__(2001, f"Query shape cannot be fingerprinted: {detail}", 400)


class CacheUnavailableError(AppError):
    """Backing store transport failure. Never surfaced to HTTP callers."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        super().__init__(2002, f"Cache unavailable during {operation}: {detail}", 503)


class InvalidationFailure(AppError):
    """One invalidation pattern could not be purged. Logged and counted, not raised."""

    def __init__(self, entity_type: str, entity_id: str | None, pattern: str, detail: str) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.pattern = pattern
        super().__init__(
            2003,
            f"Invalidation failed for {entity_type}:{entity_id} pattern={pattern}: {detail}",
            500,
        )


class InvalidPatternError(AppError):
    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        super().__init__(2004, f"Invalid cache key pattern: {pattern!r}", 500)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class LoaderError(AppError):
    """Document store failure while loading or mutating entities."""

    def __init__(self, detail: str) -> None:
        super().__init__(9003, f"Document store error: {detail}", 503)
