from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import pandas as pd
from dotenv import load_dotenv
from rich import print, print_json
from rich.markup import escape
from tabulate import tabulate

from hubspot_mcp import config
from hubspot_mcp.core.properties import CONTACT_LIST_PROPERTIES
from hubspot_mcp.handle import ClientHandle, default_handle
from hubspot_mcp.tools import TOOLS, call_tool

PAGE_SIZE = config.MAX_LIST_LIMIT


def cmd_serve(args):
    from hubspot_mcp import server

    server.run()


def cmd_tools(args):
    rows = [
        {
            "name": t.name,
            "arguments": ", ".join(t.input_model.model_fields) or "-",
            "description": t.description,
        }
        for t in TOOLS.values()
    ]
    print(escape(tabulate(rows, headers="keys", tablefmt="github")))


def cmd_call(args):
    try:
        arguments = json.loads(args.args) if args.args else {}
    except json.JSONDecodeError as e:
        raise SystemExit(f"--args must be a JSON object: {e}")
    if not isinstance(arguments, dict):
        raise SystemExit("--args must be a JSON object")
    result = call_tool(args.name, arguments)
    if result.is_error:
        print(f"[red]{escape(result.text)}")
        sys.exit(1)
    print_json(result.text)


def pull_contacts(limit: int, out_path: Path, handle: ClientHandle = default_handle) -> int:
    """Page through list_contacts, resupplying the cursor, and write a CSV."""
    crm = handle.get()
    rows = []
    after = None
    while len(rows) < limit:
        page = crm.list_contacts(limit=min(PAGE_SIZE, limit - len(rows)), after=after)
        for c in page.results:
            rows.append({"id": c.id, **{p: c.properties.get(p) for p in CONTACT_LIST_PROPERTIES}})
        after = page.next_after
        if not after or not page.results:
            break
    pd.DataFrame(rows, columns=["id", *CONTACT_LIST_PROPERTIES]).to_csv(out_path, index=False)
    return len(rows)


def cmd_pull_contacts(args):
    out = Path(args.out or "contacts.csv")
    n = pull_contacts(limit=int(args.limit), out_path=out)
    print(f"[green]Wrote {n} contacts → {out}")


def main(argv: list[str] | None = None):
    load_dotenv()
    ap = argparse.ArgumentParser("hubspot-mcp")
    sub = ap.add_subparsers(dest="cmd", required=True)
    p0 = sub.add_parser("serve", help="Run the MCP server over stdio")
    p0.set_defaults(func=cmd_serve)
    p1 = sub.add_parser("tools", help="List the registered tools")
    p1.set_defaults(func=cmd_tools)
    p2 = sub.add_parser("call", help="Invoke one tool and print its result")
    p2.add_argument("name", help="Tool name, e.g. hubspot_get_contact")
    p2.add_argument("--args", default=None, help='Tool arguments as JSON, e.g. {"email": "a@b.com"}')
    p2.set_defaults(func=cmd_call)
    p3 = sub.add_parser("pull-contacts", help="Export contacts from HubSpot to CSV")
    p3.add_argument("--limit", default="1000")
    p3.add_argument("--out", default="contacts.csv")
    p3.set_defaults(func=cmd_pull_contacts)
    args = ap.parse_args(argv)
    if args.cmd != "serve":
        # serve sets up its own logging
        config.configure_logging(default="WARNING")
    args.func(args)


if __name__ == "__main__":
    main()
