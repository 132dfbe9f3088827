#!/usr/bin/env python3
"""
mockdb CLI

Inspect YAML database layouts:
  mockdb tree <layout>                  - Show collections and resources
  mockdb resolve <layout> <uri>         - Resolve a connection URI

Usage:
  mockdb tree fixtures/db.yaml
  mockdb resolve fixtures/db.yaml xmldb:test://localhost/db/sub1 --user admin
"""

import argparse
import logging
import sys
from typing import List, Optional

from .database import Database
from .errors import XMLDBError
from .layout import Layout


def format_tree(db: Database) -> List[str]:
    """One line per collection (sorted by path), resources indented below it."""
    lines = [f"{db.get_name()}:"]
    for key, collection in sorted(db.collections()):
        depth = key.count("/")
        indent = "  " * (depth + 1)
        lines.append(f"{indent}{collection.name()}/")
        for resource_id in sorted(collection.list_resources()):
            resource = collection.get_resource(resource_id)
            lines.append(f"{indent}  {resource_id} [{type(resource).__name__}]")
    return lines


def cmd_tree(args) -> int:
    db = Layout.from_file(args.layout).build()
    for line in format_tree(db):
        print(line)
    return 0


def cmd_resolve(args) -> int:
    db = Layout.from_file(args.layout).build()
    if not db.accepts_uri(args.uri):
        print(f"URI not accepted by database {db.get_name()}: {args.uri}", file=sys.stderr)
        return 1

    info = {}
    if args.user is not None:
        info["user"] = args.user
    if args.password is not None:
        info["password"] = args.password

    try:
        collection = db.get_collection(args.uri, info)
    except XMLDBError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if collection is None:
        print(f"No such collection: {args.uri}", file=sys.stderr)
        return 1
    print(collection.get_name())
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="mockdb",
        description="mockdb - In-memory XML:DB test database",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    tree_parser = subparsers.add_parser("tree", help="Show collections and resources")
    tree_parser.add_argument("layout", help="Layout YAML file")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a connection URI")
    resolve_parser.add_argument("layout", help="Layout YAML file")
    resolve_parser.add_argument("uri", help="Connection URI, e.g. xmldb:test:/db")
    resolve_parser.add_argument("--user", help="User name passed to authentication")
    resolve_parser.add_argument("--password", help="Password passed to authentication")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s %(levelname)s: %(message)s",
    )

    try:
        if args.command == "tree":
            return cmd_tree(args)
        elif args.command == "resolve":
            return cmd_resolve(args)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
