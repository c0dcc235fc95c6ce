"""Tool boundary: validated inputs in, `ToolResult` out.

Every tool is a thin wrapper around one CRM connector call. The wrapper builds the
property bag from typed arguments, shapes the response the way the assistant
expects it, and turns *any* raised error into an `Error: ...` result. The
gateway and facade below this layer never catch or log; this is the only place
that does.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from hubspot_mcp import config
from hubspot_mcp.connectors.base import InvalidArgumentError
from hubspot_mcp.core.schemas import ObjectType, SearchFilter
from hubspot_mcp.handle import ClientHandle, default_handle

log = logging.getLogger(__name__)

EXTRA_PROPERTIES = "Additional properties (key: HubSpot property name, value: property value)"
UPDATE_PROPERTIES = "Properties to update (key: HubSpot property name, value: property value)"


# Inputs


class _Input(BaseModel):
    # Both the snake_case field names and the camelCase aliases are accepted.
    model_config = ConfigDict(populate_by_name=True)


class CreateContactInput(_Input):
    email: str = Field(..., description="Contact email address")
    first_name: str = Field(..., alias="firstName", description="First name")
    last_name: str = Field(..., alias="lastName", description="Last name")
    phone: str | None = Field(None, description="Phone number")
    company: str | None = Field(None, description="Company name")
    properties: dict[str, str] | None = Field(None, description=EXTRA_PROPERTIES)


class GetContactInput(_Input):
    contact_id: str | None = Field(
        None, alias="contactId", description="Contact ID (either contact_id or email is required)"
    )
    email: str | None = Field(
        None, description="Search by email address (either contact_id or email is required)"
    )


class UpdateContactInput(_Input):
    contact_id: str = Field(..., alias="contactId", description="ID of the contact to update")
    properties: dict[str, str] = Field(..., description=UPDATE_PROPERTIES)


class SearchContactsInput(_Input):
    query: str = Field(..., description="Search query (search by name, email, phone, etc.)")
    filters: list[SearchFilter] | None = Field(None, description="Additional filter conditions")


class ListInput(_Input):
    limit: int | None = Field(
        None,
        ge=config.MIN_LIST_LIMIT,
        le=config.MAX_LIST_LIMIT,
        description="Number of results to return (1-100, default: 10)",
    )
    after: str | None = Field(
        None, description="Pagination cursor (value from paging.next.after in previous response)"
    )


class CreateCompanyInput(_Input):
    name: str = Field(..., description="Company name")
    domain: str | None = Field(None, description="Company domain (e.g. example.com)")
    properties: dict[str, str] | None = Field(None, description=EXTRA_PROPERTIES)


class GetCompanyInput(_Input):
    company_id: str = Field(..., alias="companyId", description="Company ID")


class SearchCompaniesInput(_Input):
    query: str = Field(..., description="Search query (search by company name or domain)")


class CreateDealInput(_Input):
    dealname: str = Field(..., description="Deal name")
    pipeline: str | None = Field(None, description="Pipeline ID (default: default)")
    dealstage: str | None = Field(None, description="Deal stage ID")
    amount: str | None = Field(None, description="Deal amount")
    properties: dict[str, str] | None = Field(None, description=EXTRA_PROPERTIES)


class GetDealInput(_Input):
    deal_id: str = Field(..., alias="dealId", description="Deal ID")


class UpdateDealInput(_Input):
    deal_id: str = Field(..., alias="dealId", description="ID of the deal to update")
    properties: dict[str, str] = Field(..., description=UPDATE_PROPERTIES)


class NoInput(_Input):
    pass


class CreateAssociationInput(_Input):
    from_type: ObjectType = Field(..., alias="fromType", description="Source object type")
    from_id: str = Field(..., alias="fromId", description="Source object ID")
    to_type: ObjectType = Field(..., alias="toType", description="Target object type")
    to_id: str = Field(..., alias="toId", description="Target object ID")
    association_type: str = Field(
        ...,
        alias="associationType",
        description="Association type (e.g. contact_to_company, company_to_contact, deal_to_contact)",
    )


# Results


@dataclass(frozen=True)
class ToolResult:
    text: str
    is_error: bool = False

    @classmethod
    def success(cls, payload: Any) -> ToolResult:
        return cls(json.dumps(payload, indent=2, ensure_ascii=False))

    @classmethod
    def failure(cls, exc: BaseException) -> ToolResult:
        return cls(f"Error: {error_message(exc)}", is_error=True)


def error_message(exc: BaseException) -> str:
    if isinstance(exc, ValidationError):
        fields = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '(input)'}: {err['msg']}"
            for err in exc.errors()
        )
        return f"Invalid arguments: {fields}"
    return str(exc) or "An unknown error occurred"


def _merged(base: dict[str, str | None], extra: dict[str, str] | None) -> dict[str, str]:
    """Drop empty optional fields, then let explicit extra properties win."""
    out = {k: v for k, v in base.items() if v}
    out.update(extra or {})
    return out


def _written(key: str, obj) -> dict[str, Any]:
    return {"success": True, key: obj.id, "properties": obj.properties}


def _page(result, *, with_total: bool) -> dict[str, Any]:
    d = result.to_dict()
    out: dict[str, Any] = {}
    if with_total:
        out["total"] = result.total
    out["results"] = d.get("results", [])
    if "paging" in d:
        out["paging"] = d["paging"]
    return out


# Handlers


def create_contact(handle: ClientHandle, p: CreateContactInput) -> dict[str, Any]:
    properties = _merged(
        {
            "email": p.email,
            "firstname": p.first_name,
            "lastname": p.last_name,
            "phone": p.phone,
            "company": p.company,
        },
        p.properties,
    )
    return _written("contactId", handle.get().create_contact(properties))


def get_contact(handle: ClientHandle, p: GetContactInput) -> dict[str, Any]:
    if not p.contact_id and not p.email:
        raise InvalidArgumentError("Either contact_id or email must be provided.")
    crm = handle.get()
    if p.contact_id:
        return crm.get_contact_by_id(p.contact_id).to_dict()
    return crm.get_contact_by_email(p.email).to_dict()


def update_contact(handle: ClientHandle, p: UpdateContactInput) -> dict[str, Any]:
    return _written("contactId", handle.get().update_contact(p.contact_id, p.properties))


def search_contacts(handle: ClientHandle, p: SearchContactsInput) -> dict[str, Any]:
    return _page(handle.get().search_contacts(p.query, p.filters), with_total=True)


def list_contacts(handle: ClientHandle, p: ListInput) -> dict[str, Any]:
    return _page(handle.get().list_contacts(p.limit, p.after), with_total=False)


def create_company(handle: ClientHandle, p: CreateCompanyInput) -> dict[str, Any]:
    properties = _merged({"name": p.name, "domain": p.domain}, p.properties)
    return _written("companyId", handle.get().create_company(properties))


def get_company(handle: ClientHandle, p: GetCompanyInput) -> dict[str, Any]:
    return handle.get().get_company(p.company_id).to_dict()


def search_companies(handle: ClientHandle, p: SearchCompaniesInput) -> dict[str, Any]:
    return _page(handle.get().search_companies(p.query), with_total=True)


def create_deal(handle: ClientHandle, p: CreateDealInput) -> dict[str, Any]:
    properties = _merged(
        {
            "dealname": p.dealname,
            "pipeline": p.pipeline,
            "dealstage": p.dealstage,
            "amount": p.amount,
        },
        p.properties,
    )
    return _written("dealId", handle.get().create_deal(properties))


def get_deal(handle: ClientHandle, p: GetDealInput) -> dict[str, Any]:
    return handle.get().get_deal(p.deal_id).to_dict()


def update_deal(handle: ClientHandle, p: UpdateDealInput) -> dict[str, Any]:
    return _written("dealId", handle.get().update_deal(p.deal_id, p.properties))


def list_deals(handle: ClientHandle, p: ListInput) -> dict[str, Any]:
    return _page(handle.get().list_deals(p.limit, p.after), with_total=False)


def get_pipelines(handle: ClientHandle, p: NoInput) -> dict[str, Any]:
    return handle.get().get_pipelines().to_dict()


def create_association(handle: ClientHandle, p: CreateAssociationInput) -> dict[str, Any]:
    result = handle.get().create_association(
        p.from_type, p.from_id, p.to_type, p.to_id, p.association_type
    )
    return {"success": True, "association": result.to_dict()}


# Registry


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_model: type[BaseModel]
    handler: Callable[[ClientHandle, Any], dict[str, Any]]


TOOLS: dict[str, ToolSpec] = {
    t.name: t
    for t in (
        ToolSpec(
            "hubspot_create_contact",
            "Create a new contact in HubSpot CRM",
            CreateContactInput,
            create_contact,
        ),
        ToolSpec(
            "hubspot_get_contact",
            "Get a contact from HubSpot CRM by ID or email address",
            GetContactInput,
            get_contact,
        ),
        ToolSpec(
            "hubspot_update_contact",
            "Update contact properties in HubSpot CRM",
            UpdateContactInput,
            update_contact,
        ),
        ToolSpec(
            "hubspot_search_contacts",
            "Search contacts in HubSpot CRM by name, email, phone, or custom filters",
            SearchContactsInput,
            search_contacts,
        ),
        ToolSpec(
            "hubspot_list_contacts",
            "List contacts in HubSpot CRM with pagination",
            ListInput,
            list_contacts,
        ),
        ToolSpec(
            "hubspot_create_company",
            "Create a new company in HubSpot CRM",
            CreateCompanyInput,
            create_company,
        ),
        ToolSpec(
            "hubspot_get_company",
            "Get company details from HubSpot CRM by ID",
            GetCompanyInput,
            get_company,
        ),
        ToolSpec(
            "hubspot_search_companies",
            "Search companies in HubSpot CRM by name or domain",
            SearchCompaniesInput,
            search_companies,
        ),
        ToolSpec(
            "hubspot_create_deal",
            "Create a new deal in HubSpot CRM",
            CreateDealInput,
            create_deal,
        ),
        ToolSpec(
            "hubspot_get_deal",
            "Get deal details from HubSpot CRM by ID",
            GetDealInput,
            get_deal,
        ),
        ToolSpec(
            "hubspot_update_deal",
            "Update deal properties in HubSpot CRM",
            UpdateDealInput,
            update_deal,
        ),
        ToolSpec(
            "hubspot_list_deals",
            "List deals in HubSpot CRM with pagination",
            ListInput,
            list_deals,
        ),
        ToolSpec(
            "hubspot_get_pipelines",
            "Get all deal pipelines and their stages from HubSpot CRM",
            NoInput,
            get_pipelines,
        ),
        ToolSpec(
            "hubspot_create_association",
            "Create an association between HubSpot CRM objects (e.g. contact-company, deal-contact)",
            CreateAssociationInput,
            create_association,
        ),
    )
}


def call_tool(
    name: str, arguments: dict[str, Any] | None = None, handle: ClientHandle | None = None
) -> ToolResult:
    """Validate `arguments` for tool `name`, run it, and wrap the outcome."""
    args = {k: v for k, v in (arguments or {}).items() if v is not None}
    log.info("%s called with: %s", name, ", ".join(f"{k}={v!r}" for k, v in args.items()))
    tool = TOOLS.get(name)
    try:
        if tool is None:
            raise InvalidArgumentError(f"Unknown tool '{name}'. Available: {sorted(TOOLS)}")
        params = tool.input_model.model_validate(args)
        payload = tool.handler(handle or default_handle, params)
    except Exception as e:
        result = ToolResult.failure(e)
        log.warning("  ← %s failed: %s", name, result.text)
        return result
    result = ToolResult.success(payload)
    log.info("  ← %s ok (%d bytes)", name, len(result.text))
    return result
