"""Core type definitions for hostpick."""

from datetime import datetime

from pydantic import BaseModel, Field


class HostEntry(BaseModel):
    """A connection profile derived from one SSH config Host block."""

    alias: str = Field(min_length=1)
    aliases: list[str] = []
    host: str = ""
    user: str = ""
    port: int = 22
    identity_files: list[str] = []
    tags: list[str] = []
    pinned_at: datetime | None = None

    # Provenance
    source_file: str = ""
    readonly: bool = False  # True unless defined in the root config file

    @property
    def pinned(self) -> bool:
        return self.pinned_at is not None
