"""
ArangoSearch and search-alias views
"""

import pytest
from arango.exceptions import ViewGetError

from arangotest.core import ensure_arangosearch_view, ensure_search_alias_view, skip_below_version
from arangotest.utils.error_handling import is_not_found


@pytest.fixture
def view_name(database, data_factory):
    name = data_factory.unique_name("view")
    yield name
    database.delete_view(name, ignore_missing=True)


class TestViews:

    def test_create_arangosearch_view(self, database, collection, view_name):
        view = database.create_arangosearch_view(
            view_name,
            properties={"links": {collection.name: {"includeAllFields": True}}},
        )
        assert view["name"] == view_name
        assert view["type"] == "arangosearch"
        assert collection.name in database.view(view_name)["links"]
        assert view_name in [v["name"] for v in database.views()]

    def test_ensure_existing_view(self, database, view_name):
        created = ensure_arangosearch_view(database, view_name)
        opened = ensure_arangosearch_view(database, view_name)
        assert created["id"] == opened["id"]

    def test_read_missing_view(self, database, data_factory):
        with pytest.raises(ViewGetError) as exc_info:
            database.view(data_factory.unique_name("missing"))
        assert is_not_found(exc_info.value)

    def test_remove_view(self, database, view_name):
        database.create_arangosearch_view(view_name)
        assert database.delete_view(view_name)
        assert view_name not in [v["name"] for v in database.views()]
        assert database.delete_view(view_name, ignore_missing=True) is False


class TestSearchAliasViews:

    @pytest.fixture(autouse=True)
    def inverted_indexes_supported(self, client):
        skip_below_version(client, "3.10")

    @pytest.fixture
    def inverted_index(self, collection, data_factory):
        return collection.add_inverted_index(
            fields=[{"name": "field1"}], name=data_factory.unique_name("inverted")
        )

    def test_create_empty_search_alias_view(self, database, view_name):
        view = ensure_search_alias_view(database, view_name)
        assert view["type"] == "search-alias"
        assert database.view(view_name).get("indexes", []) == []
        assert view_name in [v["name"] for v in database.views()]

    def test_link_inverted_index(self, database, collection, inverted_index, view_name):
        ensure_search_alias_view(database, view_name)
        database.update_view(view_name, {
            "indexes": [{"collection": collection.name, "index": inverted_index["name"]}],
        })

        indexes = database.view(view_name)["indexes"]
        assert [(i["collection"], i["index"]) for i in indexes] == [(collection.name, inverted_index["name"])]

    def test_create_with_index(self, database, collection, inverted_index, view_name):
        properties = {"indexes": [{"collection": collection.name, "index": inverted_index["name"]}]}
        ensure_search_alias_view(database, view_name, properties)
        assert len(database.view(view_name)["indexes"]) == 1

    def test_open_as_arangosearch_fails(self, database, view_name):
        ensure_search_alias_view(database, view_name)
        with pytest.raises(pytest.fail.Exception, match="as arangosearch view"):
            ensure_arangosearch_view(database, view_name)

    def test_remove_search_alias_view(self, database, view_name):
        ensure_search_alias_view(database, view_name)
        assert database.delete_view(view_name)
        assert view_name not in [v["name"] for v in database.views()]
