"""
Provisioning helpers for integration tests
Each helper opens an entity, creates it when missing and fails the running
test with a described error on anything unexpected.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pytest
from arango.collection import StandardCollection
from arango.database import StandardDatabase
from arango.graph import Graph

from ..utils.error_handling import describe, is_conflict, is_not_found
from .client import ArangoTestClient

logger = logging.getLogger(__name__)

ENGINE_ROCKSDB = "rocksdb"
ENGINE_MMFILES = "mmfiles"

VIEW_ARANGOSEARCH = "arangosearch"
VIEW_SEARCH_ALIAS = "search-alias"


def ensure_database(client: ArangoTestClient, name: str, options: Optional[Dict[str, Any]] = None) -> StandardDatabase:
    """Open database `name`, creating it when it does not exist"""
    db = client.db(name)
    try:
        db.properties()
        return db
    except Exception as e:
        if not is_not_found(e):
            pytest.fail(f"Failed to open database '{name}': {describe(e)}")

    try:
        client.system_db.create_database(name, **(options or {}))
    except Exception as e:
        if is_conflict(e):
            pytest.fail(f"Failed to create database (conflict) '{name}': {describe(e)}")
        pytest.fail(f"Failed to create database '{name}': {describe(e)}")
    logger.debug(f"Created database {name}")
    return db


def ensure_collection(db: StandardDatabase, name: str, options: Optional[Dict[str, Any]] = None) -> StandardCollection:
    """Open collection `name`, creating it when it does not exist"""
    col = db.collection(name)
    try:
        col.properties()
        return col
    except Exception as e:
        if not is_not_found(e):
            pytest.fail(f"Failed to open collection '{name}': {describe(e)}")

    try:
        return db.create_collection(name, **(options or {}))
    except Exception as e:
        pytest.fail(f"Failed to create collection '{name}': {describe(e)}")


def assert_collection(db: StandardDatabase, name: str) -> StandardCollection:
    """Open collection `name`, failing the test when it does not exist"""
    col = db.collection(name)
    try:
        col.properties()
    except Exception as e:
        if is_not_found(e):
            pytest.fail(f"Collection '{name}': does not exist")
        pytest.fail(f"Failed to open collection '{name}': {describe(e)}")
    return col


def ensure_graph(db: StandardDatabase, name: str, options: Optional[Dict[str, Any]] = None) -> Graph:
    graph = db.graph(name)
    try:
        graph.properties()
        return graph
    except Exception as e:
        if not is_not_found(e):
            pytest.fail(f"Failed to open graph '{name}': {describe(e)}")

    try:
        return db.create_graph(name, **(options or {}))
    except Exception as e:
        pytest.fail(f"Failed to create graph '{name}': {describe(e)}")


def ensure_vertex_collection(graph: Graph, name: str):
    """Return vertex collection `name` of the graph, adding it when needed"""
    try:
        if graph.has_vertex_collection(name):
            return graph.vertex_collection(name)
    except Exception as e:
        pytest.fail(f"Failed to open vertex collection: {describe(e)}")

    try:
        return graph.create_vertex_collection(name)
    except Exception as e:
        pytest.fail(f"Failed to create vertex collection: {describe(e)}")


def ensure_edge_collection(graph: Graph, name: str, from_collections: Iterable[str], to_collections: Iterable[str]):
    """Return edge collection `name` of the graph, adding an edge definition when needed"""
    try:
        if graph.has_edge_definition(name):
            return graph.edge_collection(name)
    except Exception as e:
        pytest.fail(f"Failed to open edge collection: {describe(e)}")

    try:
        return graph.create_edge_definition(
            edge_collection=name,
            from_vertex_collections=list(from_collections),
            to_vertex_collections=list(to_collections),
        )
    except Exception as e:
        pytest.fail(f"Failed to create edge collection: {describe(e)}")


def ensure_user(client: ArangoTestClient, name: str, options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    sys_db = client.system_db
    try:
        return sys_db.user(name)
    except Exception as e:
        if not is_not_found(e):
            pytest.fail(f"Failed to open user '{name}': {describe(e)}")

    try:
        return sys_db.create_user(name, **(options or {}))
    except Exception as e:
        pytest.fail(f"Failed to create user '{name}': {describe(e)}")


def _ensure_view(db: StandardDatabase, name: str, view_type: str, properties: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    try:
        view = db.view(name)
    except Exception as e:
        if not is_not_found(e):
            pytest.fail(f"Failed to open view '{name}': {describe(e)}")
        try:
            return db.create_view(name, view_type, properties=properties)
        except Exception as e:
            pytest.fail(f"Failed to create {view_type} view '{name}': {describe(e)}")

    if view.get("type") != view_type:
        pytest.fail(f"Failed to open view '{name}' as {view_type} view: type is {view.get('type')}")
    return view


def ensure_arangosearch_view(db: StandardDatabase, name: str, properties: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return _ensure_view(db, name, VIEW_ARANGOSEARCH, properties)


def ensure_search_alias_view(db: StandardDatabase, name: str, properties: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Open or create a search-alias view over inverted indexes"""
    return _ensure_view(db, name, VIEW_SEARCH_ALIAS, properties)


def ensure_analyzer(db: StandardDatabase, name: str, analyzer_type: str,
                    properties: Optional[Dict[str, Any]] = None,
                    features: Optional[List[str]] = None) -> Tuple[bool, Dict[str, Any]]:
    """
    Open or create an analyzer.

    Returns (existed, analyzer). Creating an analyzer that already exists with
    the same definition succeeds on the server, so `existed` comes from the lookup.
    """
    try:
        return True, db.analyzer(name)
    except Exception as e:
        if not is_not_found(e):
            pytest.fail(f"Failed to open analyzer '{name}': {describe(e)}")

    try:
        return False, db.create_analyzer(name, analyzer_type, properties=properties, features=features)
    except Exception as e:
        pytest.fail(f"Failed to create analyzer '{name}': {describe(e)}")


def create_document(collection: StandardCollection, document: Any) -> Dict[str, Any]:
    """Insert a document and return its metadata (_id, _key, _rev)"""
    if hasattr(document, "to_document"):
        document = document.to_document()
    try:
        return collection.insert(document)
    except Exception as e:
        pytest.fail(f"Failed to create document: {describe(e)}")


def clean(db: StandardDatabase, name: str) -> None:
    """Drop collection `name` at the end of a test, ignoring a missing one"""
    try:
        db.delete_collection(name, ignore_missing=True)
    except Exception as e:
        pytest.fail(f"Failed to remove collection '{name}': {describe(e)}")


def skip_if_engine_type(db: StandardDatabase, engine: str) -> None:
    info = db.engine()
    if info.get("name") == engine:
        pytest.skip(f"test not supported on engine type {engine}")
