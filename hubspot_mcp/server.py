# =============================================================================
# hubspot_mcp/server.py - FastMCP server exposing the HubSpot CRM tools
# =============================================================================
#
# Each tool below is a typed signature plus a docstring (the assistant reads
# both) and a single call into hubspot_mcp.tools.call_tool, which validates
# the arguments, runs the CRM call, and shapes the result. A failed call comes
# back from call_tool as "Error: ..." text and is raised here as ToolError so
# the protocol marks it as an error result.
#
# Run standalone:  python -m hubspot_mcp.server   (or: python cli.py serve)
# =============================================================================

from typing import Annotated, Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from hubspot_mcp import config
from hubspot_mcp.core.schemas import ObjectType, SearchFilter
from hubspot_mcp.tools import call_tool

mcp = FastMCP("hubspot-crm")

ExtraProperties = Annotated[
    dict[str, str] | None,
    Field(description="Additional properties (key: HubSpot property name, value: property value)"),
]
UpdateProperties = Annotated[
    dict[str, str],
    Field(description="Properties to update (key: HubSpot property name, value: property value)"),
]
Limit = Annotated[
    int | None,
    Field(
        ge=config.MIN_LIST_LIMIT,
        le=config.MAX_LIST_LIMIT,
        description="Number of results to return (1-100, default: 10)",
    ),
]
After = Annotated[
    str | None,
    Field(description="Pagination cursor (value from paging.next.after in previous response)"),
]


def _respond(name: str, **arguments: Any) -> str:
    result = call_tool(name, arguments)
    if result.is_error:
        raise ToolError(result.text)
    return result.text


# =============================================================================
# Contacts
# =============================================================================
@mcp.tool()
def hubspot_create_contact(
    email: Annotated[str, Field(description="Contact email address")],
    first_name: Annotated[str, Field(description="First name")],
    last_name: Annotated[str, Field(description="Last name")],
    phone: Annotated[str | None, Field(description="Phone number")] = None,
    company: Annotated[str | None, Field(description="Company name")] = None,
    properties: ExtraProperties = None,
) -> str:
    """Create a new contact in HubSpot CRM.

    Returns the new contact's ID and the properties HubSpot stored.
    """
    return _respond(
        "hubspot_create_contact",
        email=email,
        first_name=first_name,
        last_name=last_name,
        phone=phone,
        company=company,
        properties=properties,
    )


@mcp.tool()
def hubspot_get_contact(
    contact_id: Annotated[
        str | None, Field(description="Contact ID (either contact_id or email is required)")
    ] = None,
    email: Annotated[
        str | None,
        Field(description="Search by email address (either contact_id or email is required)"),
    ] = None,
) -> str:
    """Get a contact from HubSpot CRM by ID or email address.

    If both are given the ID is used.
    """
    return _respond("hubspot_get_contact", contact_id=contact_id, email=email)


@mcp.tool()
def hubspot_update_contact(
    contact_id: Annotated[str, Field(description="ID of the contact to update")],
    properties: UpdateProperties,
) -> str:
    """Update contact properties in HubSpot CRM."""
    return _respond("hubspot_update_contact", contact_id=contact_id, properties=properties)


@mcp.tool()
def hubspot_search_contacts(
    query: Annotated[str, Field(description="Search query (search by name, email, phone, etc.)")],
    filters: Annotated[
        list[SearchFilter] | None, Field(description="Additional filter conditions")
    ] = None,
) -> str:
    """Search contacts in HubSpot CRM by name, email, phone, or custom filters.

    All filters must match (they are sent as one filter group). At most 20
    contacts are returned.
    """
    return _respond("hubspot_search_contacts", query=query, filters=filters)


@mcp.tool()
def hubspot_list_contacts(limit: Limit = None, after: After = None) -> str:
    """List contacts in HubSpot CRM with pagination."""
    return _respond("hubspot_list_contacts", limit=limit, after=after)


# =============================================================================
# Companies
# =============================================================================
@mcp.tool()
def hubspot_create_company(
    name: Annotated[str, Field(description="Company name")],
    domain: Annotated[str | None, Field(description="Company domain (e.g. example.com)")] = None,
    properties: ExtraProperties = None,
) -> str:
    """Create a new company in HubSpot CRM."""
    return _respond("hubspot_create_company", name=name, domain=domain, properties=properties)


@mcp.tool()
def hubspot_get_company(company_id: Annotated[str, Field(description="Company ID")]) -> str:
    """Get company details from HubSpot CRM by ID."""
    return _respond("hubspot_get_company", company_id=company_id)


@mcp.tool()
def hubspot_search_companies(
    query: Annotated[str, Field(description="Search query (search by company name or domain)")],
) -> str:
    """Search companies in HubSpot CRM by name or domain."""
    return _respond("hubspot_search_companies", query=query)


# =============================================================================
# Deals
# =============================================================================
@mcp.tool()
def hubspot_create_deal(
    dealname: Annotated[str, Field(description="Deal name")],
    pipeline: Annotated[str | None, Field(description="Pipeline ID (default: default)")] = None,
    dealstage: Annotated[str | None, Field(description="Deal stage ID")] = None,
    amount: Annotated[str | None, Field(description="Deal amount")] = None,
    properties: ExtraProperties = None,
) -> str:
    """Create a new deal in HubSpot CRM.

    Call hubspot_get_pipelines first if you need valid pipeline or stage IDs.
    """
    return _respond(
        "hubspot_create_deal",
        dealname=dealname,
        pipeline=pipeline,
        dealstage=dealstage,
        amount=amount,
        properties=properties,
    )


@mcp.tool()
def hubspot_get_deal(deal_id: Annotated[str, Field(description="Deal ID")]) -> str:
    """Get deal details from HubSpot CRM by ID."""
    return _respond("hubspot_get_deal", deal_id=deal_id)


@mcp.tool()
def hubspot_update_deal(
    deal_id: Annotated[str, Field(description="ID of the deal to update")],
    properties: UpdateProperties,
) -> str:
    """Update deal properties in HubSpot CRM."""
    return _respond("hubspot_update_deal", deal_id=deal_id, properties=properties)


@mcp.tool()
def hubspot_list_deals(limit: Limit = None, after: After = None) -> str:
    """List deals in HubSpot CRM with pagination."""
    return _respond("hubspot_list_deals", limit=limit, after=after)


# =============================================================================
# Pipelines & associations
# =============================================================================
@mcp.tool()
def hubspot_get_pipelines() -> str:
    """Get all deal pipelines and their stages from HubSpot CRM."""
    return _respond("hubspot_get_pipelines")


@mcp.tool()
def hubspot_create_association(
    from_type: Annotated[ObjectType, Field(description="Source object type")],
    from_id: Annotated[str, Field(description="Source object ID")],
    to_type: Annotated[ObjectType, Field(description="Target object type")],
    to_id: Annotated[str, Field(description="Target object ID")],
    association_type: Annotated[
        str,
        Field(
            description="Association type (e.g. contact_to_company, company_to_contact, deal_to_contact)"
        ),
    ],
) -> str:
    """Create an association between HubSpot CRM objects (e.g. contact-company, deal-contact)."""
    return _respond(
        "hubspot_create_association",
        from_type=from_type,
        from_id=from_id,
        to_type=to_type,
        to_id=to_id,
        association_type=association_type,
    )


def run() -> None:
    config.configure_logging()
    mcp.run()


if __name__ == "__main__":
    run()
