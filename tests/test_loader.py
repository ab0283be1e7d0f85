"""Tests for loading the host registry from SSH config files."""

from datetime import datetime
from pathlib import Path

import pytest
from paramiko.ssh_exception import ConfigParseError

from hostpick.metadata import HostMetadata, MetadataFile
from hostpick.sshconfig import ConfigLoader, HostBlock, ParamikoDecoder, load_hosts
from hostpick.types import HostEntry

ROOT_CONFIG = """\
Include extra.conf

Host web1 web*
    HostName 10.0.0.1
    User deploy
    Port 2222
    IdentityFile ~/.ssh/id_a
    IdentityFile ~/.ssh/id_b

Host web*
    User nobody

Host *
    ServerAliveInterval 30
"""

EXTRA_CONFIG = """\
Host web1
    HostName 10.9.9.9
    User other

Host db db-primary
    HostName db.internal
"""


def write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


@pytest.fixture
def loader(tmp_path):
    return ConfigLoader(home=str(tmp_path / "home"))


class FakeDecoder:
    """Decoder returning canned blocks per path."""

    def __init__(self, blocks: dict[str, list[HostBlock]]):
        self.blocks = blocks
        self.calls: list[str] = []

    def decode(self, path: str) -> list[HostBlock]:
        self.calls.append(path)
        if path not in self.blocks:
            raise OSError(f"no such file: {path}")
        return self.blocks[path]


class TestParamikoDecoder:
    def test_host_blocks(self, tmp_path):
        path = write(tmp_path / "config", ROOT_CONFIG)

        blocks = ParamikoDecoder().decode(str(path))

        patterns = [b.patterns for b in blocks]
        assert ["web1", "web*"] in patterns
        assert ["web*"] in patterns
        web1 = next(b for b in blocks if b.patterns == ["web1", "web*"])
        assert web1.directives["hostname"] == "10.0.0.1"
        assert web1.directives["identityfile"] == ["~/.ssh/id_a", "~/.ssh/id_b"]

    def test_match_blocks_skipped(self, tmp_path):
        path = write(tmp_path / "config", "Match host foo\n    User bar\n\nHost real\n    User baz\n")

        blocks = ParamikoDecoder().decode(str(path))

        assert all("matches" not in b.directives for b in blocks)
        assert ["real"] in [b.patterns for b in blocks]

    def test_inline_comments(self, tmp_path):
        path = write(
            tmp_path / "config",
            'Host web1 # primary box\n    HostName 10.0.0.1 # prod\n    ProxyCommand "nc #%h" %p\n',
        )

        blocks = ParamikoDecoder().decode(str(path))

        web1 = next(b for b in blocks if "web1" in b.patterns)
        assert web1.patterns == ["web1"]
        assert web1.directives["hostname"] == "10.0.0.1"
        assert "#%h" in web1.directives["proxycommand"]

    def test_non_utf8_comment(self, tmp_path):
        path = tmp_path / "config"
        path.write_bytes(b"Host web1\n    HostName 10.0.0.1\n# caf\xe9 server\n")

        blocks = ParamikoDecoder().decode(str(path))

        web1 = next(b for b in blocks if b.patterns == ["web1"])
        assert web1.directives["hostname"] == "10.0.0.1"

    def test_unparsable_line_raises(self, tmp_path):
        path = write(tmp_path / "config", "bogus\n")
        with pytest.raises(ConfigParseError):
            ParamikoDecoder().decode(str(path))


class TestHostBlock:
    def test_concrete_aliases(self):
        block = HostBlock(patterns=["web1", "web*", "!bad", "db?", "x[12]", "db"])
        assert block.concrete_aliases() == ["web1", "db"]

    def test_wildcard_only(self):
        assert HostBlock(patterns=["web*"]).concrete_aliases() == []


class TestLoad:
    def test_root_and_include(self, tmp_path, loader):
        root = write(tmp_path / "config", ROOT_CONFIG)
        extra = write(tmp_path / "extra.conf", EXTRA_CONFIG)

        result = loader.load(str(root))

        assert result.files == [str(root), str(extra)]
        assert result.warnings == []
        assert [e.alias for e in result.entries] == ["web1", "db"]

    def test_root_wins_alias_collision(self, tmp_path, loader):
        root = write(tmp_path / "config", ROOT_CONFIG)
        write(tmp_path / "extra.conf", EXTRA_CONFIG)

        entries = loader.load(str(root)).entries

        web1 = [e for e in entries if e.alias == "web1"]
        assert len(web1) == 1
        assert web1[0].host == "10.0.0.1"
        assert web1[0].user == "deploy"
        assert web1[0].readonly is False
        assert web1[0].source_file == str(root)

    def test_mapped_attributes(self, tmp_path, loader):
        root = write(tmp_path / "config", ROOT_CONFIG)

        web1 = loader.load(str(root)).entries[0]

        assert web1.aliases == ["web1"]
        assert web1.port == 2222
        assert web1.identity_files == ["~/.ssh/id_a", "~/.ssh/id_b"]

    def test_included_entries_readonly(self, tmp_path, loader):
        root = write(tmp_path / "config", ROOT_CONFIG)
        extra = write(tmp_path / "extra.conf", EXTRA_CONFIG)

        db = loader.load(str(root)).entries[1]

        assert db.readonly is True
        assert db.source_file == str(extra)
        assert db.aliases == ["db", "db-primary"]
        assert db.port == 22
        assert db.user == ""

    def test_wildcard_only_block_dropped(self, tmp_path, loader):
        root = write(tmp_path / "config", "Host web*\n    User x\n\nHost *\n    User y\n")

        assert loader.load(str(root)).entries == []

    def test_invalid_port_ignored(self, tmp_path, loader):
        root = write(tmp_path / "config", "Host a\n    Port ssh\n")

        assert loader.load(str(root)).entries[0].port == 22

    def test_decode_failure_skips_file(self, tmp_path, loader):
        root = write(tmp_path / "config", "Include bad.conf good.conf\n\nHost a\n    HostName a.example\n")
        bad = write(tmp_path / "bad.conf", "bogus\n")
        write(tmp_path / "good.conf", "Host b\n    HostName b.example\n")

        result = loader.load(str(root))

        assert [e.alias for e in result.entries] == ["a", "b"]
        assert len(result.warnings) == 1
        assert str(bad) in result.warnings[0]

    def test_missing_root(self, tmp_path, loader):
        result = loader.load(str(tmp_path / "missing"))

        assert result.entries == []
        assert len(result.warnings) == 1

    def test_cycle_loads_each_file_once(self, tmp_path, loader):
        a = write(tmp_path / "a.conf", "Include b.conf\nHost a\n    HostName a.example\n")
        b = write(tmp_path / "b.conf", "Include a.conf\nHost b\n    HostName b.example\n")

        result = loader.load(str(a))

        assert result.files == [str(a), str(b)]
        assert [e.alias for e in result.entries] == ["a", "b"]

    def test_unmatched_include_does_not_abort(self, tmp_path, loader):
        root = write(tmp_path / "config", "Include somepattern.conf\nHost a\n    HostName a.example\n")

        result = loader.load(str(root))

        assert [e.alias for e in result.entries] == ["a"]
        assert result.warnings == []

    def test_tilde_include_with_home(self, tmp_path, loader):
        root = write(tmp_path / "config", "Include ~/.ssh/hosts.conf\n")
        write(tmp_path / "home" / ".ssh" / "hosts.conf", "Host h\n    HostName h.example\n")

        entries = loader.load(str(root)).entries

        assert [e.alias for e in entries] == ["h"]
        assert entries[0].readonly is True

    def test_idempotent(self, tmp_path, loader):
        root = write(tmp_path / "config", ROOT_CONFIG)
        write(tmp_path / "extra.conf", EXTRA_CONFIG)

        first = loader.load(str(root))
        second = loader.load(str(root))

        assert first.entries == second.entries
        assert first.files == second.files

    def test_latin1_comment_keeps_registry(self, tmp_path, loader):
        root = tmp_path / "config"
        root.write_bytes(b"Include a.conf\n\nHost web1\n    HostName 10.0.0.1\n# caf\xe9 server\n")
        write(tmp_path / "a.conf", "Host db\n    HostName db.internal\n")

        result = loader.load(str(root))

        assert [e.alias for e in result.entries] == ["web1", "db"]
        assert result.warnings == []

    def test_inline_comments_stripped(self, tmp_path, loader):
        root = write(tmp_path / "config", "Host web1 # primary box\n    HostName 10.0.0.1 # prod\n")

        result = loader.load(str(root))

        assert len(result.entries) == 1
        assert result.entries[0].aliases == ["web1"]
        assert result.entries[0].host == "10.0.0.1"

    def test_metadata_overlay(self, tmp_path):
        root = write(tmp_path / "config", ROOT_CONFIG)
        write(tmp_path / "extra.conf", EXTRA_CONFIG)
        pinned = datetime(2026, 3, 1, 9, 30)
        metadata = MetadataFile(hosts={"db": HostMetadata(tags=["prod", "sql"], pinned_at=pinned)})

        entries = load_hosts(str(root), home=str(tmp_path), metadata=metadata).entries

        db = next(e for e in entries if e.alias == "db")
        assert db.tags == ["prod", "sql"]
        assert db.pinned_at == pinned
        web1 = next(e for e in entries if e.alias == "web1")
        assert web1.tags == []
        assert not web1.pinned


class TestCustomDecoder:
    def test_decoder_called_in_processing_order(self, tmp_path):
        root = write(tmp_path / "config", "Include extra.conf\n")
        extra = write(tmp_path / "extra.conf", "")
        decoder = FakeDecoder(
            {
                str(root): [HostBlock(patterns=["a"], directives={"hostname": "a.example"})],
                str(extra): [
                    HostBlock(patterns=["a"], directives={"hostname": "other"}),
                    HostBlock(patterns=["b*"]),
                    HostBlock(patterns=["c", "c*"], directives={"user": "ops"}),
                ],
            }
        )

        result = ConfigLoader(decoder=decoder, home=str(tmp_path)).load(str(root))

        assert decoder.calls == [str(root), str(extra)]
        assert [e.alias for e in result.entries] == ["a", "c"]
        assert result.entries[0].host == "a.example"
        assert result.entries[1].user == "ops"

    def test_custom_mapper(self, tmp_path):
        root = write(tmp_path / "config", "")

        class TagMapper:
            def apply(self, entry: HostEntry, directives):
                entry.tags.append("mapped")

        decoder = FakeDecoder({str(root): [HostBlock(patterns=["a"])]})
        result = ConfigLoader(decoder=decoder, mapper=TagMapper(), home=str(tmp_path)).load(str(root))

        assert result.entries[0].tags == ["mapped"]
