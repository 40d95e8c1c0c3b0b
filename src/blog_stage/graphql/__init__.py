"""GraphQL documents and Relay connection helpers."""

from . import mutations, queries
from .connections import edge_count, first_node, first_record, nodes, page_info, records
from .operation import Operation

__all__ = [
    "Operation",
    "queries",
    "mutations",
    "nodes",
    "first_node",
    "edge_count",
    "page_info",
    "records",
    "first_record",
]
