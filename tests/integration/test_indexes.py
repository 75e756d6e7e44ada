"""
Index creation, listing and removal
"""

import pytest
from arango.exceptions import IndexDeleteError

from arangotest.utils.error_handling import is_not_found


def index_types(col):
    return sorted(index["type"] for index in col.indexes())


class TestIndexes:

    def test_default_indexes(self, collection, edge_collection):
        assert index_types(collection) == ["primary"]
        assert index_types(edge_collection) == ["edge", "primary"]

    def test_create_persistent_index(self, collection):
        index = collection.add_persistent_index(fields=["name"], unique=True)
        assert index["type"] == "persistent"
        assert index["fields"] == ["name"]
        assert index["unique"] is True
        assert index.get("new") is True

        again = collection.add_persistent_index(fields=["name"], unique=True)
        assert again["id"] == index["id"]
        assert again.get("new") is False

    def test_unique_index_rejects_duplicates(self, collection):
        collection.add_persistent_index(fields=["name"], unique=True)
        collection.insert({"name": "Jan"})
        results = collection.insert_many([{"name": "Jan"}, {"name": "Piet"}])
        assert isinstance(results[0], Exception)
        assert not isinstance(results[1], Exception)

    def test_create_ttl_index(self, collection):
        index = collection.add_ttl_index(fields=["createdAt"], expiry_time=3600)
        assert index["type"] == "ttl"
        assert index["expiry_time"] == 3600

    def test_create_geo_index(self, collection):
        index = collection.add_geo_index(fields=["location"], geo_json=True)
        assert index["type"] in ("geo", "geo1", "geo2")
        assert index["fields"] == ["location"]

    def test_remove_index(self, collection):
        index = collection.add_persistent_index(fields=["age"])
        assert collection.delete_index(index["id"])
        assert index_types(collection) == ["primary"]

    def test_remove_missing_index(self, collection):
        with pytest.raises(IndexDeleteError) as exc_info:
            collection.delete_index("999999")
        assert is_not_found(exc_info.value)
        assert collection.delete_index("999999", ignore_missing=True) is False
