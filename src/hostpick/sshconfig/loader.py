"""Load a flat host registry from an SSH config file and its includes."""

import logging
from dataclasses import dataclass, field

from paramiko.ssh_exception import ConfigParseError

from hostpick.metadata import MetadataFile
from hostpick.sshconfig.base import ConfigDecoder, DirectiveMapper, HostBlock
from hostpick.sshconfig.include import IncludeResolver
from hostpick.sshconfig.mapper import SSHDirectiveMapper
from hostpick.sshconfig.paramiko_decoder import ParamikoDecoder
from hostpick.types import HostEntry

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """Result of loading the host registry."""

    entries: list[HostEntry] = field(default_factory=list)
    files: list[str] = field(default_factory=list)  # processing order, root first
    warnings: list[str] = field(default_factory=list)


class ConfigLoader:
    """Build the host registry from a root config file.

    Files are processed root first, then includes in resolution order. The
    first entry seen for an alias wins, so the root file always takes
    precedence over included files. Per-file failures are recorded as
    warnings and never abort the load.
    """

    def __init__(
        self,
        decoder: ConfigDecoder | None = None,
        mapper: DirectiveMapper | None = None,
        home: str | None = None,
        metadata: MetadataFile | None = None,
    ):
        self.decoder = decoder or ParamikoDecoder()
        self.mapper = mapper or SSHDirectiveMapper()
        self.home = home
        self.metadata = metadata

    def resolve_files(self, root_path: str) -> tuple[list[str], list[str]]:
        """Return (processing order, warnings) for root_path."""
        resolver = IncludeResolver(home=self.home)
        root = resolver.absolute(root_path)
        warnings = []

        resolved = resolver.resolve(root)
        if resolved.error:
            logger.warning(f"Failed to resolve includes: {resolved.error}")
            warnings.append(resolved.error)

        return [root] + resolved.paths, warnings

    def load(self, root_path: str) -> LoadResult:
        """Load every host entry reachable from root_path."""
        files, warnings = self.resolve_files(root_path)
        result = LoadResult(files=files, warnings=warnings)
        seen: set[str] = set()

        for i, path in enumerate(files):
            try:
                blocks = self.decoder.decode(path)
            except (OSError, ValueError, ConfigParseError) as e:
                logger.warning(f"Failed to decode {path}: {e}")
                result.warnings.append(f"failed to decode {path}: {e}")
                continue

            for entry in self.to_entries(blocks, path, is_root=(i == 0)):
                if entry.alias in seen:
                    logger.debug(f"Skipping duplicate alias {entry.alias} from {path}")
                    continue
                seen.add(entry.alias)
                result.entries.append(entry)

        if self.metadata is not None:
            self.metadata.apply(result.entries)

        logger.debug(f"Loaded {len(result.entries)} hosts from {len(files)} files")
        return result

    def to_entries(self, blocks: list[HostBlock], source: str, is_root: bool) -> list[HostEntry]:
        """Convert decoded blocks to entries tagged with their origin."""
        entries = []
        for block in blocks:
            aliases = block.concrete_aliases()
            if not aliases:
                continue

            entry = HostEntry(
                alias=aliases[0],
                aliases=aliases,
                port=22,
                identity_files=[],
                source_file=source,
                readonly=not is_root,
            )
            self.mapper.apply(entry, block.directives)
            entries.append(entry)
        return entries


def load_hosts(root_path: str, home: str | None = None, metadata: MetadataFile | None = None) -> LoadResult:
    """Load hosts with the default paramiko decoder and directive mapper."""
    return ConfigLoader(home=home, metadata=metadata).load(root_path)
