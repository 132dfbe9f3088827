# tests/test_collection.py
"""Tests for collections."""

from datetime import datetime, timezone

import pytest

from mockdb import (
    BinaryResource,
    Collection,
    CollectionData,
    Database,
    ErrorCode,
    XMLDBError,
    XMLResource,
)


@pytest.fixture
def db():
    return Database()


@pytest.fixture
def collection(db):
    return db.add_collection("db").get_collection_by_path("db")


class TestCollectionData:
    """Test CollectionData validation."""

    def test_valid(self, db):
        data = CollectionData(db, "name")
        assert data.name == "name"
        assert data.creation <= datetime.now(timezone.utc)

    @pytest.mark.parametrize("name", [None, "", "   ", "a/b", "/"])
    def test_invalid_name(self, db, name):
        with pytest.raises(ValueError):
            CollectionData(db, name)

    def test_requires_database(self):
        with pytest.raises(ValueError):
            CollectionData(None, "name")


class TestHierarchy:
    """Test names and child collections."""

    def test_get_name(self, collection):
        assert collection.get_name() == "/db"

    def test_name_and_str(self, collection):
        assert collection.name() == "db"
        assert str(collection) == "db"

    def test_parent(self, db, collection):
        assert collection.get_parent_collection() is None
        db.add_collection("db/sub")
        assert collection.get_child_collection("sub").get_parent_collection() is collection

    def test_database(self, db, collection):
        assert collection.get_database() is db

    def test_child_collection_count(self, db, collection):
        assert collection.get_child_collection_count() == 0

        collection.add_collection("sub1")
        collection.add_collection("sub2")
        assert collection.get_child_collection_count() == 2

        # Grandchildren are not counted
        db.add_collection("db/sub1/sub1_1")
        db.add_collection("db/sub2/sub2_1")
        assert collection.get_child_collection_count() == 2

    def test_list_child_collections(self, db, collection):
        assert collection.list_child_collections() == []

        collection.add_collection("sub1")
        collection.add_collection("sub2")
        assert sorted(collection.list_child_collections()) == ["sub1", "sub2"]

        db.add_collection("db/sub1/sub1_1")
        db.add_collection("db/sub2/sub2_1")
        assert sorted(collection.list_child_collections()) == ["sub1", "sub2"]

    def test_direct_children_only(self, db):
        db.add_collection("a").add_collection("a/b").add_collection("a/b/c")
        a = db.get_collection_by_path("a")
        assert a.get_child_collection_count() == 1
        assert a.list_child_collections() == ["b"]

    def test_get_child_collection(self, collection):
        assert collection.get_child_collection("sub") is None

        collection.add_collection("sub")
        collection.add_collection("sub/subsub")

        sub = collection.get_child_collection("sub")
        assert sub.get_name() == "/db/sub"
        subsub = sub.get_child_collection("subsub")
        assert subsub.get_name() == "/db/sub/subsub"

    def test_traverse_hierarchy(self, db):
        db.add_collection("a/b/c")
        names = []
        db.get_collection_by_path("a/b/c").traverse_hierarchy(names.append)
        assert names == ["a", "b", "c"]

    def test_creation_time(self, collection):
        assert collection.get_creation_time() <= datetime.now(timezone.utc)


class TestLifecycle:
    """Test open/close."""

    def test_close(self, collection):
        assert collection.is_open()
        collection.close()
        assert not collection.is_open()
        collection.close()
        assert not collection.is_open()

    def test_close_does_not_cascade(self, db, collection):
        collection.add_collection("child")
        collection.close()
        assert collection.get_child_collection("child").is_open()


class TestResources:
    """Test resource management on a collection."""

    def test_create_resource_types(self, collection):
        xml = collection.create_resource("doc.xml", XMLResource)
        binary = collection.create_resource("blob", BinaryResource)

        assert isinstance(xml, XMLResource)
        assert isinstance(binary, BinaryResource)
        assert xml.get_parent_collection() is collection
        # Creating does not store
        assert collection.get_resource_count() == 0

    def test_create_resource_invalid_type(self, collection):
        with pytest.raises(XMLDBError) as exc_info:
            collection.create_resource("x", str)
        assert exc_info.value.error_code == ErrorCode.INVALID_RESOURCE

    def test_store_get_remove(self, collection):
        resource = collection.create_resource("doc.xml", XMLResource)
        collection.store_resource(resource)

        assert collection.get_resource("doc.xml") is resource
        assert collection.get_resource_count() == 1
        assert collection.list_resources() == ["doc.xml"]

        collection.remove_resource(resource)
        assert collection.get_resource("doc.xml") is None
        assert collection.get_resource_count() == 0

        # Removing again is a no-op
        collection.remove_resource(resource)

    def test_store_overwrites_by_id(self, collection):
        first = collection.create_resource("doc", XMLResource)
        second = collection.create_resource("doc", XMLResource)
        collection.store_resource(first)
        collection.store_resource(second)
        assert collection.get_resource("doc") is second
        assert collection.get_resource_count() == 1

    def test_add_resource(self, collection):
        resource = collection.add_resource("blob", BinaryResource)
        assert isinstance(resource, BinaryResource)
        assert collection.get_resource("blob") is resource

    def test_create_id_not_implemented(self, collection):
        with pytest.raises(XMLDBError) as exc_info:
            collection.create_id()
        assert exc_info.value.error_code == ErrorCode.NOT_IMPLEMENTED


class TestServices:
    """No services are available."""

    def test_has_and_find(self, collection):
        assert not collection.has_service(object)
        assert collection.find_service(object) is None

    def test_get_service(self, collection):
        with pytest.raises(XMLDBError) as exc_info:
            collection.get_service(object)
        assert exc_info.value.error_code == ErrorCode.NOT_IMPLEMENTED


def test_collection_properties(collection):
    collection.set_property("encoding", "UTF-8")
    assert collection.get_property("encoding") == "UTF-8"
    assert isinstance(collection, Collection)
