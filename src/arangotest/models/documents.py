"""
Document and edge shapes stored by the integration suites
"""

from typing import Any, ClassVar, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class ArangoDocument(BaseModel):
    """Base for test documents, serialised with ArangoDB attribute names"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # Attributes (by alias) left out of the request body when empty
    omit_empty: ClassVar[Tuple[str, ...]] = ()

    def to_document(self) -> Dict[str, Any]:
        data = self.model_dump(by_alias=True)
        for name in self.omit_empty:
            if not data.get(name):
                data.pop(name, None)
        return data

    @classmethod
    def from_document(cls, document: Dict[str, Any]):
        return cls.model_validate(document)


class UserDoc(ArangoDocument):
    name: str
    age: int


class UserDocWithKey(ArangoDocument):
    omit_empty: ClassVar[Tuple[str, ...]] = ("_key",)

    key: str = Field("", alias="_key")
    name: str
    age: int


class Account(ArangoDocument):
    id: str
    user: Optional[UserDoc] = None


class Book(ArangoDocument):
    Title: str


class RouteEdge(ArangoDocument):
    omit_empty: ClassVar[Tuple[str, ...]] = ("_from", "_to", "distance")

    from_: str = Field("", alias="_from")
    to: str = Field("", alias="_to")
    distance: int = 0


class RouteEdgeWithKey(ArangoDocument):
    omit_empty: ClassVar[Tuple[str, ...]] = ("_key", "_from", "_to", "distance")

    key: str = Field("", alias="_key")
    from_: str = Field("", alias="_from")
    to: str = Field("", alias="_to")
    distance: int = 0


class RelationEdge(ArangoDocument):
    omit_empty: ClassVar[Tuple[str, ...]] = ("_from", "_to", "type")

    from_: str = Field("", alias="_from")
    to: str = Field("", alias="_to")
    type: str = ""


class AccountEdge(ArangoDocument):
    omit_empty: ClassVar[Tuple[str, ...]] = ("_from", "_to")

    from_: str = Field("", alias="_from")
    to: str = Field("", alias="_to")
    user: Optional[UserDoc] = None
