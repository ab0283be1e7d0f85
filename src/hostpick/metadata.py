"""Read-only host metadata: tags and pin timestamps keyed by alias."""

import logging
from datetime import datetime
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

from hostpick.types import HostEntry

logger = logging.getLogger(__name__)


class HostMetadata(BaseModel):
    """Per-alias attributes that SSH config cannot express."""

    tags: list[str] = []
    pinned_at: datetime | None = None


class MetadataFile(BaseModel):
    """Top-level layout of the metadata YAML file."""

    hosts: dict[str, HostMetadata] = {}

    def apply(self, entries: list[HostEntry]) -> None:
        """Overlay tags and pins onto entries in place."""
        for entry in entries:
            meta = self.hosts.get(entry.alias)
            if meta is None:
                continue
            entry.tags = list(meta.tags)
            entry.pinned_at = meta.pinned_at


def load_metadata(path: Path) -> MetadataFile:
    """Load metadata from YAML. A missing file yields empty metadata."""
    if not path.exists():
        return MetadataFile()

    with open(path) as f:
        data = yaml.safe_load(f)
    return MetadataFile(**(data or {}))


def try_load_metadata(path: Path) -> tuple[MetadataFile, str | None]:
    """Load metadata, returning a warning instead of raising on bad input."""
    try:
        return load_metadata(path), None
    except (OSError, yaml.YAMLError, ValidationError, TypeError) as e:
        logger.warning(f"Ignoring metadata file {path}: {e}")
        return MetadataFile(), f"invalid metadata file {path}: {e}"
