"""Marker service: mutation pipeline and HTTP application."""

from campaignmap.server.app import create_app
from campaignmap.server.pipeline import MutationPipeline

__all__ = ["MutationPipeline", "create_app"]
