"""GraphQL operation descriptor."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

OperationKind = Literal["query", "mutation"]


@dataclass(frozen=True)
class Operation:
    """A named GraphQL document plus the collections it touches.

    ``collections`` lists the root collection fields (``postsCollection``,
    ``commentsCollection``...) read by a query or written by a mutation. The
    client uses them to tag cached reads and to evict those reads after a
    successful write.
    """

    name: str
    document: str
    collections: tuple[str, ...]
    kind: OperationKind = "query"

    @property
    def is_mutation(self) -> bool:
        return self.kind == "mutation"
