"""SSH config ingestion: include resolution, decoding and registry loading."""

from hostpick.sshconfig.base import ConfigDecoder, DirectiveMapper, HostBlock
from hostpick.sshconfig.include import IncludeResolver, ResolveResult
from hostpick.sshconfig.loader import ConfigLoader, LoadResult, load_hosts
from hostpick.sshconfig.mapper import SSHDirectiveMapper
from hostpick.sshconfig.paramiko_decoder import ParamikoDecoder

__all__ = [
    "ConfigDecoder",
    "ConfigLoader",
    "DirectiveMapper",
    "HostBlock",
    "IncludeResolver",
    "LoadResult",
    "ParamikoDecoder",
    "ResolveResult",
    "SSHDirectiveMapper",
    "load_hosts",
]
