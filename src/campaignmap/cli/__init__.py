"""Command-line interface for campaignmap."""

from __future__ import annotations

import asyncio
import logging as logging

from campaignmap.cli.app import main as main
from campaignmap.cli.commands import markers as markers_command
from campaignmap.cli.commands import serve as serve_command
from campaignmap.cli.commands import watch as watch_command
from campaignmap.cli.parser import build_parser as build_parser
from campaignmap.config import load_config as load_config

_run_serve = serve_command.run_serve

_COMMANDS = {
    "list": markers_command.run_list,
    "add": markers_command.run_add,
    "move": markers_command.run_move,
    "rename": markers_command.run_rename,
    "delete": markers_command.run_delete,
    "watch": watch_command.run_watch,
}

__all__ = ["asyncio", "build_parser", "load_config", "main"]
