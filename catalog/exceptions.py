"""Error kinds raised by the store and controllers and rendered by main.py."""

from typing import Optional


class CatalogError(Exception):
    """Base exception for all catalog errors."""

    status_code = 500

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# ---- Store Errors ----

class StoreFailure(CatalogError):
    """An entity store operation failed. Never retried."""


class StoreTimeout(StoreFailure):
    """An aggregated read did not finish within the configured timeout."""

    def __init__(self, lookup: str, timeout: float):
        super().__init__(
            "Store read timed out", {"lookup": lookup, "timeout": timeout}
        )
        self.lookup = lookup
        self.timeout = timeout


# ---- Request Errors ----

class NotFound(CatalogError):
    """Requested entity does not exist on a detail or update path."""

    status_code = 404

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} Not Found", {"id": entity_id})
        self.entity = entity
        self.entity_id = entity_id
