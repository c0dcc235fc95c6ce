"""hubspot_mcp package root: HubSpot CRM operations exposed as MCP tools.

The request gateway lives in hubspot_mcp.hubspot, the per-capability facade in
hubspot_mcp.connectors, and the tool boundary in hubspot_mcp.tools and
hubspot_mcp.server. This file intentionally keeps imports minimal so that
`import hubspot_mcp` has no side effects (in particular it never reads the
access token).
"""

__all__ = []
