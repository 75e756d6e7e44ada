from .documents import (
    Account,
    AccountEdge,
    ArangoDocument,
    Book,
    RelationEdge,
    RouteEdge,
    RouteEdgeWithKey,
    UserDoc,
    UserDocWithKey,
)

__all__ = [
    "Account",
    "AccountEdge",
    "ArangoDocument",
    "Book",
    "RelationEdge",
    "RouteEdge",
    "RouteEdgeWithKey",
    "UserDoc",
    "UserDocWithKey",
]
