"""Property projections requested from HubSpot per object type and read shape.

HubSpot only returns the properties a read asks for (plus a handful of
defaults), so these lists decide what the tools can see. They are fixed on
purpose; callers cannot widen them.
"""

from __future__ import annotations

CONTACT_SEARCH_PROPERTIES: tuple[str, ...] = (
    "email",
    "firstname",
    "lastname",
    "phone",
    "company",
    "lifecyclestage",
    "hs_lead_status",
)
CONTACT_LIST_PROPERTIES = CONTACT_SEARCH_PROPERTIES
CONTACT_DETAIL_PROPERTIES: tuple[str, ...] = CONTACT_SEARCH_PROPERTIES + (
    "createdate",
    "lastmodifieddate",
)

COMPANY_SEARCH_PROPERTIES: tuple[str, ...] = (
    "name",
    "domain",
    "industry",
    "phone",
    "city",
    "state",
    "country",
    "numberofemployees",
    "annualrevenue",
)
COMPANY_DETAIL_PROPERTIES: tuple[str, ...] = COMPANY_SEARCH_PROPERTIES + (
    "createdate",
    "lastmodifieddate",
)

DEAL_LIST_PROPERTIES: tuple[str, ...] = (
    "dealname",
    "pipeline",
    "dealstage",
    "amount",
    "closedate",
    "hubspot_owner_id",
)
DEAL_DETAIL_PROPERTIES: tuple[str, ...] = DEAL_LIST_PROPERTIES + (
    "createdate",
    "lastmodifieddate",
)


def as_query(properties: tuple[str, ...]) -> str:
    """Comma-joined form used by the GET endpoints' `properties` parameter."""
    return ",".join(properties)
