"""
Tests for Brewfile operations — parsing, appending, applying.
"""

import textwrap
from pathlib import Path

import pytest

from brew_search.adapters.mock import DryRunBrewAdapter
from brew_search.core.models.package import PackageKind
from brew_search.core.services.brewfile_ops import (
    ApplyError,
    BrewfileError,
    BrewfileManager,
    ManifestReadError,
    ManifestWriteError,
    declaration_line,
    describe,
    parse_line,
)
from conftest import FIXED_NOW

HEADER = "# Added by brew-search on 2024-03-01 12:30:45"


@pytest.fixture
def manager(brewfile_path: Path) -> BrewfileManager:
    return BrewfileManager(brewfile_path, adapter=DryRunBrewAdapter(), clock=lambda: FIXED_NOW)


class TestParseLine:
    """Tests for single-line parsing."""

    def test_declarations(self):
        assert parse_line('brew "wget"') == ("brew", "wget")
        assert parse_line("cask 'vlc'") == ("cask", "vlc")
        assert parse_line('tap "foo/bar"') == ("tap", "foo/bar")

    def test_trailing_comment_and_indent(self):
        assert parse_line('   brew "wget" # Internet file retriever') == ("brew", "wget")

    def test_options_after_identifier(self):
        assert parse_line('brew "postgresql@16", restart_service: true') == ("brew", "postgresql@16")

    def test_ignored_lines(self):
        for line in ["", "   ", "# brew \"wget\"", 'mas "Xcode", id: 497799835', "brew", 'vscode "ext"']:
            assert parse_line(line) is None, line


class TestLoad:
    """Tests for reading the Brewfile."""

    def test_load_existing(self, manager: BrewfileManager, brewfile_path: Path):
        brewfile_path.write_text(textwrap.dedent("""\
            brew "wget" # comment
            cask "vlc"
            tap "foo/bar"
            # comment

        """))
        assert manager.load_existing() == {"wget": True, "vlc": True, "foo/bar": True}

    def test_missing_file_is_empty(self, manager: BrewfileManager):
        assert manager.load_existing() == {}
        assert manager.load_entries() == []

    def test_entries_keep_keyword_and_line(self, manager: BrewfileManager, brewfile_path: Path):
        brewfile_path.write_text('# header\n\ncask "vlc"\nbrew "vlc"\n')
        entries = manager.load_entries()
        assert [(e.keyword, e.identifier, e.line_number) for e in entries] == [
            ("cask", "vlc", 3),
            ("brew", "vlc", 4),
        ]
        assert entries[0].to_dict() == {"keyword": "cask", "identifier": "vlc", "line": 3}

    def test_flat_namespace(self, manager: BrewfileManager, brewfile_path: Path):
        brewfile_path.write_text('cask "docker"\nbrew "docker"\n')
        assert manager.load_existing() == {"docker": True}

    def test_unreadable_file(self, manager: BrewfileManager, brewfile_path: Path):
        brewfile_path.mkdir()
        with pytest.raises(ManifestReadError):
            manager.load_existing()

    def test_not_utf8(self, manager: BrewfileManager, brewfile_path: Path):
        brewfile_path.write_bytes(b'brew "\xff\xfe"\n')
        with pytest.raises(ManifestReadError):
            manager.load_entries()


class TestAppend:
    """Tests for appending declarations."""

    def test_new_file(self, manager, brewfile_path, make_package):
        manager.add_packages([
            make_package("wget", description="Internet file retriever"),
            make_package("vlc", kind=PackageKind.CASK),
        ])
        assert brewfile_path.read_text() == (
            f"{HEADER}\n"
            'brew "wget" # Internet file retriever\n'
            'cask "vlc"\n'
        )

    def test_creates_parent_directories(self, tmp_path, make_package):
        path = tmp_path / "dotfiles" / "Brewfile"
        BrewfileManager(path, clock=lambda: FIXED_NOW).add_packages([make_package("jq")])
        assert path.is_file()

    def test_blank_line_after_trailing_newline(self, manager, brewfile_path, make_package):
        brewfile_path.write_text('brew "git"\n')
        manager.add_packages([make_package("jq")])
        assert brewfile_path.read_text() == f'brew "git"\n\n{HEADER}\nbrew "jq"\n'

    def test_blank_line_without_trailing_newline(self, manager, brewfile_path, make_package):
        brewfile_path.write_text('brew "git"')
        manager.add_packages([make_package("jq")])
        assert brewfile_path.read_text() == f'brew "git"\n\n{HEADER}\nbrew "jq"\n'

    def test_existing_content_untouched(self, manager, brewfile_path, make_package):
        original = '# my tools\ntap "homebrew/bundle"\nbrew "git" # keep me\n'
        brewfile_path.write_text(original)
        manager.add_packages([make_package("jq")])
        assert brewfile_path.read_text().startswith(original)

    def test_duplicates_are_not_filtered(self, manager, brewfile_path, make_package):
        pkg = make_package("wget")
        manager.add_packages([pkg])
        manager.add_packages([pkg])
        text = brewfile_path.read_text()
        assert text.count('brew "wget"') == 2
        assert text.count(HEADER) == 2

    def test_empty_list_writes_nothing(self, manager, brewfile_path):
        manager.add_packages([])
        assert not brewfile_path.exists()

    def test_roundtrip_with_load(self, manager, make_package):
        manager.add_packages([make_package("wget"), make_package("vlc", kind=PackageKind.CASK)])
        assert manager.load_existing() == {"wget": True, "vlc": True}

    def test_write_failure(self, tmp_path, make_package):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        manager = BrewfileManager(blocker / "Brewfile")
        with pytest.raises(ManifestWriteError):
            manager.add_packages([make_package("jq")])


class TestDescriptions:
    """Tests for the inline description comment."""

    def test_truncated_at_sixty(self, make_package):
        pkg = make_package("x", description="a" * 61)
        assert describe(pkg) == "a" * 60 + "..."

    def test_exactly_sixty_kept(self, make_package):
        pkg = make_package("x", description="b" * 60)
        assert describe(pkg) == "b" * 60

    def test_newlines_collapsed(self, make_package):
        pkg = make_package("x", description="Multi\nline   text")
        assert declaration_line(pkg) == 'brew "x" # Multi line text'

    def test_no_description_no_comment(self, make_package):
        assert declaration_line(make_package("vlc", kind=PackageKind.CASK)) == 'cask "vlc"'


class TestBundle:
    """Tests for applying the Brewfile."""

    def test_runs_bundle(self, manager, brewfile_path):
        manager.run_bundle()
        assert manager.adapter.call_log == [["brew", "bundle", "--file", str(brewfile_path)]]

    def test_failure_raises(self, manager):
        manager.adapter.set_failure("bundle", "exit status 1")
        with pytest.raises(ApplyError, match="exit status 1"):
            manager.run_bundle()

    def test_no_adapter(self, brewfile_path):
        with pytest.raises(ApplyError):
            BrewfileManager(brewfile_path).run_bundle()

    def test_error_hierarchy(self):
        for exc in (ManifestReadError, ManifestWriteError, ApplyError):
            assert issubclass(exc, BrewfileError)
