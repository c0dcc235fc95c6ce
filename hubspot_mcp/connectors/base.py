from __future__ import annotations

from typing import Protocol, runtime_checkable

from hubspot_mcp.core.schemas import (
    AssociationResult,
    CrmObject,
    ListResult,
    PipelinesResult,
    SearchFilter,
    SearchResult,
)


class RetryableError(Exception):
    """Transient error that may succeed if retried."""


class TerminalError(Exception):
    """Non-recoverable error; user-facing guidance should be included."""


class ConfigurationError(TerminalError):
    """The process is missing configuration required before any request."""


class InvalidArgumentError(TerminalError, ValueError):
    """Caller-supplied arguments violate a precondition; raised before any request."""


class RateLimitedError(RetryableError):
    """HubSpot answered 429 on the first attempt."""

    def __init__(self, retry_after: float):
        super().__init__(f"HubSpot rate limit hit; retry after {retry_after:g}s")
        self.retry_after = retry_after


class HubSpotAPIError(TerminalError):
    """Non-success HTTP response from HubSpot."""

    def __init__(self, status_code: int, reason: str, body: str):
        super().__init__(f"HubSpot API error ({status_code} {reason}): {body}")
        self.status_code = status_code
        self.reason = reason
        self.body = body


@runtime_checkable
class CRMConnector(Protocol):
    """What the tool layer needs from a CRM backend; HubSpotCRM is the real one."""

    def create_contact(self, properties: dict[str, str]) -> CrmObject: ...

    def get_contact_by_id(self, contact_id: str) -> CrmObject: ...

    def get_contact_by_email(self, email: str) -> CrmObject: ...

    def update_contact(self, contact_id: str, properties: dict[str, str]) -> CrmObject: ...

    def search_contacts(
        self, query: str, filters: list[SearchFilter] | None = None
    ) -> SearchResult: ...

    def list_contacts(self, limit: int | None = None, after: str | None = None) -> ListResult: ...

    def create_company(self, properties: dict[str, str]) -> CrmObject: ...

    def get_company(self, company_id: str) -> CrmObject: ...

    def search_companies(self, query: str) -> SearchResult: ...

    def create_deal(self, properties: dict[str, str]) -> CrmObject: ...

    def get_deal(self, deal_id: str) -> CrmObject: ...

    def update_deal(self, deal_id: str, properties: dict[str, str]) -> CrmObject: ...

    def list_deals(self, limit: int | None = None, after: str | None = None) -> ListResult: ...

    def get_pipelines(self) -> PipelinesResult: ...

    def create_association(
        self, from_type: str, from_id: str, to_type: str, to_id: str, association_type: str
    ) -> AssociationResult: ...

    def close(self) -> None: ...
