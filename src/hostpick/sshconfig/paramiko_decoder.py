"""SSH config decoding using paramiko."""

from paramiko.config import SSHConfig

from hostpick.sshconfig.base import HostBlock
from hostpick.sshconfig.include import open_config, strip_inline_comment


class ParamikoDecoder:
    """Decode one SSH config file into its Host blocks.

    paramiko does not follow Include directives; they are kept as plain
    directives of whichever block they appear in, which is what the loader
    wants since includes are resolved separately.
    """

    def decode(self, path: str) -> list[HostBlock]:
        config = SSHConfig()
        with open_config(path) as f:
            # paramiko keeps trailing "# ..." text as part of patterns and values
            config.parse(strip_inline_comment(line) for line in f)

        # The first entry is paramiko's implicit global context (Host *).
        # Match blocks carry "matches" instead of "host".
        blocks = []
        for entry in config._config:
            if "host" not in entry:
                continue
            blocks.append(
                HostBlock(
                    patterns=list(entry["host"]),
                    directives=dict(entry.get("config", {})),
                )
            )
        return blocks
