"""CLI parser construction."""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version


def _package_version() -> str:
    try:
        return version("campaignmap")
    except PackageNotFoundError:
        return "0.0.0"


def _common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", default=None, help="Path to campaignmap.json (default: ./campaignmap.json if present)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")


def _client_options(parser: argparse.ArgumentParser) -> None:
    _common(parser)
    parser.add_argument("--url", default=None, help="Marker service base URL")
    parser.add_argument("--user", default=None, help="Name recorded in the change history")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="campaignmap")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the marker service")
    _common(serve_parser)
    serve_parser.add_argument("--host", default=None, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port (default: $PORT or 3000)")
    serve_parser.add_argument("--data", default=None, help="Path to the marker JSON document")
    serve_parser.add_argument("--audit", choices=["git", "log", "none"], default=None, help="Audit trail backend")

    list_parser = subparsers.add_parser("list", help="Print all markers")
    _client_options(list_parser)

    add_parser = subparsers.add_parser("add", help="Create a marker")
    _client_options(add_parser)
    add_parser.add_argument("name", help="Marker label")
    add_parser.add_argument("--type", default="player", help="player, location or event")
    add_parser.add_argument("--x", type=float, default=0.0, help="Image-space x (left to right)")
    add_parser.add_argument("--y", type=float, default=0.0, help="Image-space y (top to bottom)")
    add_parser.add_argument("--avatar", default="", help="Avatar image URL (empty: initials)")

    move_parser = subparsers.add_parser("move", help="Move a marker")
    _client_options(move_parser)
    move_parser.add_argument("marker_id")
    move_parser.add_argument("x", type=float)
    move_parser.add_argument("y", type=float)

    rename_parser = subparsers.add_parser("rename", help="Rename a marker")
    _client_options(rename_parser)
    rename_parser.add_argument("marker_id")
    rename_parser.add_argument("name")

    delete_parser = subparsers.add_parser("delete", help="Delete a marker")
    _client_options(delete_parser)
    delete_parser.add_argument("marker_id")

    watch_parser = subparsers.add_parser("watch", help="Poll the service and print marker changes")
    _client_options(watch_parser)
    watch_parser.add_argument("--interval", type=float, default=None, help="Poll interval in seconds")

    return parser


__all__ = ["build_parser"]
