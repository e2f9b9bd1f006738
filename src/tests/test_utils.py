import pytest

from utils.sse import sse_comment, sse_event
from utils.state import InMemorySessionTable, Session


def test_sse_event_with_name_and_dict():
    assert sse_event({"a": 1}, event="message") == 'event: message\ndata: {"a": 1}\n\n'


def test_sse_event_splits_multiline_data():
    assert sse_event("one\ntwo") == "data: one\ndata: two\n\n"


def test_sse_comment():
    assert sse_comment() == ": ping\n\n"


def test_session_table_operations():
    table = InMemorySessionTable()
    s = Session(id="a1b2", sink=object())
    table.insert(s)

    assert table.lookup("a1b2") is s
    assert "a1b2" in table
    assert len(table) == 1
    assert table.remove("a1b2") is s
    assert table.remove("a1b2") is None
    assert table.lookup("a1b2") is None


def test_session_table_rejects_duplicate_ids():
    table = InMemorySessionTable()
    table.insert(Session(id="c3d4", sink=object()))
    with pytest.raises(KeyError):
        table.insert(Session(id="c3d4", sink=object()))
    assert len(table) == 1
