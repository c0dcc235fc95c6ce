from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import quote

from hubspot_mcp import config
from hubspot_mcp.core import properties as props
from hubspot_mcp.core.schemas import (
    AssociationResult,
    CrmObject,
    ListResult,
    PipelinesResult,
    SearchFilter,
    SearchRequest,
    SearchResult,
)
from hubspot_mcp.hubspot import HubSpotClient

OBJECTS = "/crm/v3/objects"


def _seg(value: str) -> str:
    return quote(str(value), safe="")


def _object_path(object_type: str, object_id: str | None = None) -> str:
    if object_id is None:
        return f"{OBJECTS}/{object_type}"
    return f"{OBJECTS}/{object_type}/{_seg(object_id)}"


class HubSpotCRM:
    """One method per CRM capability; each is a single gateway call.

    Reads request a fixed property projection (see hubspot_mcp.core.properties).
    Pagination cursors are handed back as-is; callers resupply `after`.
    """

    def __init__(self, client: HubSpotClient):
        self.client = client

    def close(self) -> None:
        self.client.close()

    # Shared shapes

    def _create(self, object_type: str, properties: dict[str, str]) -> CrmObject:
        raw = self.client.post(_object_path(object_type), {"properties": properties})
        return CrmObject.from_dict(raw)

    def _get(
        self, object_type: str, object_id: str, projection: tuple[str, ...], **params: str
    ) -> CrmObject:
        raw = self.client.get(
            _object_path(object_type, object_id),
            {**params, "properties": props.as_query(projection)},
        )
        return CrmObject.from_dict(raw)

    def _update(self, object_type: str, object_id: str, properties: dict[str, str]) -> CrmObject:
        raw = self.client.patch(_object_path(object_type, object_id), {"properties": properties})
        return CrmObject.from_dict(raw)

    def _search(
        self,
        object_type: str,
        query: str,
        projection: tuple[str, ...],
        filters: Iterable[SearchFilter] | None = None,
    ) -> SearchResult:
        body = SearchRequest(query=query, properties=list(projection), limit=config.SEARCH_LIMIT)
        flist = [f.to_dict() for f in filters or []]
        if flist:
            # One group: HubSpot ANDs filters within a group.
            body.filter_groups = [{"filters": flist}]
        raw = self.client.post(f"{_object_path(object_type)}/search", body.to_dict())
        return SearchResult.from_dict(raw)

    def _list(
        self, object_type: str, projection: tuple[str, ...], limit: int | None, after: str | None
    ) -> ListResult:
        raw = self.client.get(
            _object_path(object_type),
            {
                "limit": limit if limit is not None else config.DEFAULT_LIST_LIMIT,
                "after": after,
                "properties": props.as_query(projection),
            },
        )
        return ListResult.from_dict(raw)

    # Contacts

    def create_contact(self, properties: dict[str, str]) -> CrmObject:
        return self._create("contacts", properties)

    def get_contact_by_id(self, contact_id: str) -> CrmObject:
        return self._get("contacts", contact_id, props.CONTACT_DETAIL_PROPERTIES)

    def get_contact_by_email(self, email: str) -> CrmObject:
        return self._get("contacts", email, props.CONTACT_DETAIL_PROPERTIES, idProperty="email")

    def update_contact(self, contact_id: str, properties: dict[str, str]) -> CrmObject:
        return self._update("contacts", contact_id, properties)

    def search_contacts(
        self, query: str, filters: Iterable[SearchFilter] | None = None
    ) -> SearchResult:
        return self._search("contacts", query, props.CONTACT_SEARCH_PROPERTIES, filters)

    def list_contacts(self, limit: int | None = None, after: str | None = None) -> ListResult:
        return self._list("contacts", props.CONTACT_LIST_PROPERTIES, limit, after)

    # Companies

    def create_company(self, properties: dict[str, str]) -> CrmObject:
        return self._create("companies", properties)

    def get_company(self, company_id: str) -> CrmObject:
        return self._get("companies", company_id, props.COMPANY_DETAIL_PROPERTIES)

    def search_companies(self, query: str) -> SearchResult:
        return self._search("companies", query, props.COMPANY_SEARCH_PROPERTIES)

    # Deals

    def create_deal(self, properties: dict[str, str]) -> CrmObject:
        return self._create("deals", properties)

    def get_deal(self, deal_id: str) -> CrmObject:
        return self._get("deals", deal_id, props.DEAL_DETAIL_PROPERTIES)

    def update_deal(self, deal_id: str, properties: dict[str, str]) -> CrmObject:
        return self._update("deals", deal_id, properties)

    def list_deals(self, limit: int | None = None, after: str | None = None) -> ListResult:
        return self._list("deals", props.DEAL_LIST_PROPERTIES, limit, after)

    # Pipelines and associations

    def get_pipelines(self) -> PipelinesResult:
        return PipelinesResult.from_dict(self.client.get("/crm/v3/pipelines/deals"))

    def create_association(
        self, from_type: str, from_id: str, to_type: str, to_id: str, association_type: str
    ) -> AssociationResult:
        path = (
            f"{_object_path(from_type, from_id)}/associations/"
            f"{_seg(to_type)}/{_seg(to_id)}/{_seg(association_type)}"
        )
        return AssociationResult.from_dict(self.client.put(path))
