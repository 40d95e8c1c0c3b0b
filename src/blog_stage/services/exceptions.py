"""Domain exceptions raised by the blog services."""

from __future__ import annotations


class EntityNotFoundError(LookupError):
    """Raised when a post, comment or profile does not exist or is hidden by RLS."""

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


class OwnershipError(PermissionError):
    """Raised when a user tries to change content they do not own."""

    def __init__(self, entity: str) -> None:
        super().__init__(f"You can only modify your own {entity.lower()}s")
        self.entity = entity
