import pytest

from core.models import MARATHON_COLUMNS, DocumentError, split_document
from utils.query_utils import coerce_id, escape_like, json_set_clause, sort_direction


def test_escape_like():
    assert escape_like("City Run") == "City Run"
    assert escape_like("50%") == "50\\%"
    assert escape_like("a_b") == "a\\_b"
    assert escape_like("c:\\x") == "c:\\\\x"


@pytest.mark.parametrize("value,expected", [
    (None, "ASC"),
    ("asc", "ASC"),
    ("desc", "DESC"),
    (" DESC ", "DESC"),
    ("newest", "ASC"),
])
def test_sort_direction(value, expected):
    assert sort_direction(value) == expected


@pytest.mark.parametrize("value,expected", [
    (7, 7),
    ("7", 7),
    (" 12 ", 12),
    ("abc", None),
    ("-1", None),
    (1.5, None),
    (True, None),
    (2 ** 63 - 1, 2 ** 63 - 1),
    (2 ** 63, None),
    (str(2 ** 64), None),
    (-5, None),
    ("\u00b2", None),
    (None, None),
])
def test_coerce_id(value, expected):
    assert coerce_id(value) == expected


def test_json_set_clause():
    expr, params = json_set_clause({"title": "City Run", "tags": ["road"]})
    assert expr == "json_set(data, ?, json(?), ?, json(?))"
    assert params == ['$."title"', '"City Run"', '$."tags"', '["road"]']

    assert json_set_clause({}) == ("data", [])


def test_split_document():
    columns, extra = split_document(
        {"creatorEmail": "host@example.com", "title": "City Run", "tags": ["road"]},
        MARATHON_COLUMNS,
    )
    assert columns == {"creator_email": "host@example.com"}
    assert extra == {"title": "City Run", "tags": ["road"]}


def test_split_document_rejects_bad_shapes():
    with pytest.raises(DocumentError):
        split_document({"createdAt": ["2025"]}, MARATHON_COLUMNS)
    with pytest.raises(DocumentError):
        split_document({"creatorEmail": True}, MARATHON_COLUMNS)
    with pytest.raises(DocumentError):
        split_document({'bad"key': 1}, MARATHON_COLUMNS)
