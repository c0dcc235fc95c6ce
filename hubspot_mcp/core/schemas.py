from __future__ import annotations

from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field

FilterOperator = Literal[
    "EQ",
    "NEQ",
    "LT",
    "LTE",
    "GT",
    "GTE",
    "BETWEEN",
    "IN",
    "NOT_IN",
    "HAS_PROPERTY",
    "NOT_HAS_PROPERTY",
    "CONTAINS_TOKEN",
    "NOT_CONTAINS_TOKEN",
]
FILTER_OPERATORS: tuple[str, ...] = get_args(FilterOperator)

ObjectType = Literal["contacts", "companies", "deals"]


class _Payload(BaseModel):
    """HubSpot payload decoded as-is; fields we don't model are kept verbatim."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        return cls.model_validate(data)


class CrmObject(_Payload):
    id: str
    properties: dict[str, str | None] = Field(default_factory=dict)
    created_at: str | None = Field(None, alias="createdAt")
    updated_at: str | None = Field(None, alias="updatedAt")
    archived: bool | None = None


class PagingNext(_Payload):
    after: str
    link: str | None = None


class Paging(_Payload):
    next: PagingNext | None = None


class SearchResult(_Payload):
    total: int = 0
    results: list[CrmObject] = Field(default_factory=list)
    paging: Paging | None = None

    @property
    def next_after(self) -> str | None:
        return self.paging.next.after if self.paging and self.paging.next else None


class ListResult(_Payload):
    results: list[CrmObject] = Field(default_factory=list)
    paging: Paging | None = None

    @property
    def next_after(self) -> str | None:
        return self.paging.next.after if self.paging and self.paging.next else None


class PipelineStage(_Payload):
    id: str
    label: str
    display_order: int | None = Field(None, alias="displayOrder")
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: str | None = Field(None, alias="createdAt")
    updated_at: str | None = Field(None, alias="updatedAt")
    archived: bool | None = None


class Pipeline(_Payload):
    id: str
    label: str
    display_order: int | None = Field(None, alias="displayOrder")
    stages: list[PipelineStage] = Field(default_factory=list)
    created_at: str | None = Field(None, alias="createdAt")
    updated_at: str | None = Field(None, alias="updatedAt")
    archived: bool | None = None


class PipelinesResult(_Payload):
    results: list[Pipeline] = Field(default_factory=list)


class AssociationResult(_Payload):
    # A 204 from HubSpot decodes to an empty result, so nothing is required.
    from_object_type_id: str | None = Field(None, alias="fromObjectTypeId")
    from_object_id: int | None = Field(None, alias="fromObjectId")
    to_object_type_id: str | None = Field(None, alias="toObjectTypeId")
    to_object_id: int | None = Field(None, alias="toObjectId")
    labels: list[str] = Field(default_factory=list)


class SearchFilter(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    property_name: str = Field(
        ..., alias="propertyName", description="Property name to filter on"
    )
    operator: FilterOperator = Field(..., description="Comparison operator")
    value: str = Field(..., description="Comparison value")

    def to_dict(self) -> dict[str, Any]:
        return {"propertyName": self.property_name, "operator": self.operator, "value": self.value}


class SearchRequest(BaseModel):
    query: str
    properties: list[str]
    limit: int
    filter_groups: list[dict[str, list[dict[str, Any]]]] | None = Field(
        None, alias="filterGroups"
    )
    after: str | None = None

    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
