import pytest
from pydantic import ValidationError

from hubspot_mcp.core.schemas import FILTER_OPERATORS, CrmObject, ListResult, SearchFilter


def test_crm_object_keeps_unknown_fields():
    raw = {
        "id": "1",
        "properties": {"email": "a@b.com", "phone": None},
        "createdAt": "2026-01-01T00:00:00Z",
        "archived": False,
        "propertiesWithHistory": {"email": []},
    }
    c = CrmObject.from_dict(raw)
    assert c.properties["phone"] is None
    assert c.created_at == "2026-01-01T00:00:00Z"
    assert c.to_dict() == raw


def test_crm_object_requires_id():
    with pytest.raises(ValidationError):
        CrmObject.from_dict({"properties": {}})


def test_list_result_cursor():
    page = ListResult.from_dict({"results": []})
    assert page.next_after is None
    page = ListResult.from_dict({"results": [], "paging": {"next": {"after": "abc"}}})
    assert page.next_after == "abc"


def test_filter_operators():
    assert len(FILTER_OPERATORS) == 13
    for op in FILTER_OPERATORS:
        f = SearchFilter(propertyName="amount", operator=op, value="1")
        assert f.to_dict() == {"propertyName": "amount", "operator": op, "value": "1"}
    with pytest.raises(ValidationError):
        SearchFilter(propertyName="amount", operator="eq", value="1")
