"""Artifact and teardown services."""

from __future__ import annotations

from bddbrowser.services.artifacts import ArtifactManager
from bddbrowser.services.resource_registry import ResourceRegistry

__all__ = [
    "ArtifactManager",
    "ResourceRegistry",
]
