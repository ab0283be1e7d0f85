"""Configuration models for hostpick."""

from pathlib import Path

import yaml
from pydantic import BaseModel, field_validator

DEFAULT_CONFIG_PATH = "~/.config/hostpick/hostpick.yaml"


class HostpickConfig(BaseModel):
    """Main hostpick configuration."""

    ssh_config: str = "~/.ssh/config"
    metadata: str | None = "~/.config/hostpick/metadata.yaml"  # tags and pins
    home: str | None = None  # Overrides the home directory used for ~ expansion
    ssh_binary: str = "ssh"

    @field_validator("ssh_config", "ssh_binary")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    def home_dir(self) -> str:
        """Home directory for ~ expansion, resolved once."""
        if self.home:
            return str(Path(self.home).expanduser())
        return str(Path.home())

    def expand(self, path: str) -> Path:
        """Expand ~ in a configured path against home_dir()."""
        if path == "~" or path.startswith("~/"):
            return Path(self.home_dir()) / path[2:]
        return Path(path)

    def ssh_config_path(self) -> Path:
        return self.expand(self.ssh_config)

    def metadata_path(self) -> Path | None:
        if not self.metadata:
            return None
        return self.expand(self.metadata)


def load_config(path: Path) -> HostpickConfig:
    """Load configuration from YAML file. A missing file yields defaults."""
    if not path.exists():
        return HostpickConfig()

    with open(path) as f:
        data = yaml.safe_load(f)
    return HostpickConfig(**(data or {}))


def get_config_template() -> str:
    """Get the default configuration template."""
    return """# hostpick configuration

# Root SSH client config. Include directives are followed from here.
ssh_config: ~/.ssh/config

# Tags and pins, keyed by host alias:
#   hosts:
#     web-01:
#       tags: [prod, web]
#       pinned_at: 2026-03-01T09:30:00
metadata: ~/.config/hostpick/metadata.yaml

# Home directory used to expand ~ in paths and Include patterns.
# home: /home/me

# SSH client used by 'hostpick connect'
ssh_binary: ssh
"""
