"""Marker collection persistence."""

from campaignmap.store.json_file import JsonFileStore

__all__ = ["JsonFileStore"]
