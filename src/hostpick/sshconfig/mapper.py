"""Map decoded SSH config directives onto host entries."""

from hostpick.types import HostEntry


def _first(value: str | list[str]) -> str:
    if isinstance(value, list):
        return value[0] if value else ""
    return value


class SSHDirectiveMapper:
    """Populate connection attributes from HostName, User, Port and IdentityFile."""

    def apply(self, entry: HostEntry, directives: dict[str, str | list[str]]) -> None:
        if "hostname" in directives:
            entry.host = _first(directives["hostname"]).strip()

        if "user" in directives:
            entry.user = _first(directives["user"]).strip()

        if "port" in directives:
            try:
                entry.port = int(_first(directives["port"]))
            except ValueError:
                pass

        identity_files = directives.get("identityfile", [])
        if isinstance(identity_files, str):
            identity_files = [identity_files]
        entry.identity_files.extend(identity_files)
