"""Tests for the SharePoint list client."""

from unittest.mock import Mock

import pytest

from sharepoint.list_client import SharePointListStore
from sharepoint.types import ListItem, RequestError, StoreError

LIST = "Policies and Procedures"
ITEMS_PATH = "/_api/web/lists/getbytitle('Policies and Procedures')/items"


def list_row(item_id, title):
    return {
        "Id": item_id,
        "Title": title,
        "DocumentLink": f"https://x/sites/HR/Shared Documents/{title}.pdf",
        "Category": "Policy",
        "Department": "HR",
        "LastModified": "01/01/2024 00:00:00",
        "DocumentAuthor": "Jane Doe",
    }


def make_item(title="Leave Policy", item_id=None):
    return ListItem(
        title=title,
        document_link=f"https://x/sites/HR/Shared Documents/{title}.pdf",
        category="Policy",
        department="HR",
        last_modified="01/02/2024 00:00:00",
        document_author="Jane Doe",
        item_id=item_id,
    )


@pytest.fixture
def session():
    return Mock()


@pytest.fixture
def store(session):
    return SharePointListStore(session)


class TestFindByTitle:
    """Tests for find_by_title."""

    def test_found(self, store, session):
        """Test mapping of list columns to ListItem."""
        session.request.return_value = {"value": [list_row(7, "Leave Policy")]}

        item = store.find_by_title(LIST, "Leave Policy")

        assert item.item_id == 7
        assert item.title == "Leave Policy"
        assert item.department == "HR"
        method, path = session.request.call_args.args
        assert (method, path) == ("GET", ITEMS_PATH)
        assert session.request.call_args.kwargs["params"]["$filter"] == "Title eq 'Leave Policy'"

    def test_not_found(self, store, session):
        session.request.return_value = {"value": []}
        assert store.find_by_title(LIST, "Missing") is None

    def test_case_variant_is_not_a_match(self, store, session):
        """Test that a title differing only in case is not returned."""
        session.request.return_value = {"value": [list_row(7, "Travel Policy")]}

        assert store.find_by_title(LIST, "Travel policy") is None
        assert "$top" not in session.request.call_args.kwargs["params"]

    def test_exact_match_among_candidates(self, store, session):
        """Test that the exact-case row is picked from the filter results."""
        session.request.return_value = {
            "value": [list_row(7, "Travel Policy"), list_row(9, "Travel policy")]
        }

        assert store.find_by_title(LIST, "Travel policy").item_id == 9

    def test_quotes_escaped(self, store, session):
        """Test that apostrophes in titles are doubled in the filter."""
        session.request.return_value = {"value": []}
        store.find_by_title(LIST, "Manager's Policy")
        assert (
            session.request.call_args.kwargs["params"]["$filter"]
            == "Title eq 'Manager''s Policy'"
        )

    def test_failure_raises_store_error(self, store, session):
        session.request.side_effect = RequestError("HTTP 500", status_code=500)
        with pytest.raises(StoreError):
            store.find_by_title(LIST, "Leave Policy")


class TestUpsert:
    """Tests for upsert."""

    def test_insert(self, store, session):
        """Test that items without id are POSTed to the collection."""
        session.request.return_value = {"Id": 42}

        stored = store.upsert(LIST, make_item())

        assert stored.item_id == 42
        method, path = session.request.call_args.args
        assert (method, path) == ("POST", ITEMS_PATH)
        body = session.request.call_args.kwargs["json"]
        assert body["Title"] == "Leave Policy"
        assert body["LastModified"] == "01/02/2024 00:00:00"
        assert "Id" not in body

    def test_insert_without_id_in_response(self, store, session):
        session.request.return_value = {}
        with pytest.raises(StoreError):
            store.upsert(LIST, make_item())

    def test_update_uses_merge(self, store, session):
        """Test that existing items are MERGEd in place."""
        session.request.return_value = None

        stored = store.upsert(LIST, make_item(item_id=7))

        assert stored.item_id == 7
        method, path = session.request.call_args.args
        assert (method, path) == ("POST", f"{ITEMS_PATH}(7)")
        headers = session.request.call_args.kwargs["headers"]
        assert headers["X-HTTP-Method"] == "MERGE"
        assert headers["IF-MATCH"] == "*"

    def test_failure_raises_store_error(self, store, session):
        session.request.side_effect = RequestError("HTTP 403", status_code=403)
        with pytest.raises(StoreError):
            store.upsert(LIST, make_item(item_id=7))


class TestDelete:
    """Tests for delete."""

    def test_delete(self, store, session):
        session.request.return_value = None
        store.delete(LIST, 9)
        method, path = session.request.call_args.args
        assert (method, path) == ("POST", f"{ITEMS_PATH}(9)")
        assert session.request.call_args.kwargs["headers"]["X-HTTP-Method"] == "DELETE"

    def test_failure_raises_store_error(self, store, session):
        session.request.side_effect = RequestError("HTTP 404", status_code=404)
        with pytest.raises(StoreError):
            store.delete(LIST, 9)


class TestEnumerateAll:
    """Tests for enumerate_all."""

    def test_follows_next_link(self, store, session):
        """Test paging through odata.nextLink."""
        next_link = f"https://x{ITEMS_PATH}?$skiptoken=Paged%3dTRUE"
        session.request.side_effect = [
            {"value": [list_row(1, "A"), list_row(2, "B")], "odata.nextLink": next_link},
            {"value": [list_row(3, "C")]},
        ]

        titles = [item.title for item in store.enumerate_all(LIST)]

        assert titles == ["A", "B", "C"]
        second = session.request.call_args_list[1]
        assert second.args == ("GET", next_link)
        assert second.kwargs["params"] is None

    def test_failure_raises_store_error(self, store, session):
        session.request.side_effect = RequestError("timeout")
        with pytest.raises(StoreError):
            list(store.enumerate_all(LIST))
