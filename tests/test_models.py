"""
Tests for domain models — catalog normalization and receipts.
"""

import pytest
from pydantic import ValidationError

from brew_search.core.models import (
    CaskRecord,
    FormulaRecord,
    Package,
    PackageKind,
    Receipt,
    normalize_casks,
    normalize_formulae,
)
from conftest import CASKS_PAYLOAD, FORMULAE_PAYLOAD


class TestFormulaNormalization:
    """Tests for formula.json records."""

    def test_fields(self):
        pkgs = normalize_formulae(FORMULAE_PAYLOAD)
        wget = pkgs[0]
        assert wget.identifier == "wget"
        assert wget.display_name == "wget"
        assert wget.description == "Internet file retriever"
        assert wget.version == "1.24.5"
        assert wget.kind is PackageKind.FORMULA
        assert not wget.is_cask

    def test_drops_nameless_and_non_objects(self):
        pkgs = normalize_formulae([{"name": ""}, "wget", 42, None, {"name": "git"}])
        assert [p.identifier for p in pkgs] == ["git"]

    def test_tolerates_bad_field_types(self):
        record = FormulaRecord.model_validate({
            "name": "tool",
            "desc": None,
            "homepage": 7,
            "versions": "1.0",
        })
        pkg = record.to_package()
        assert pkg is not None
        assert pkg.description == ""
        assert pkg.homepage == ""
        assert pkg.version == ""

    def test_missing_stable_version(self):
        pkg = FormulaRecord.model_validate({"name": "x", "versions": {"head": "HEAD"}}).to_package()
        assert pkg is not None
        assert pkg.version == ""

    def test_ignores_unknown_fields(self):
        pkg = FormulaRecord.model_validate({"name": "x", "bottle": {"stable": {}}}).to_package()
        assert pkg is not None


class TestCaskNormalization:
    """Tests for cask.json records."""

    def test_fields(self):
        pkgs = normalize_casks(CASKS_PAYLOAD)
        docker = pkgs[1]
        assert docker.identifier == "docker"
        assert docker.full_name == "Docker Desktop"
        assert docker.version == "4.28.0"
        assert docker.kind is PackageKind.CASK
        assert docker.is_cask

    def test_empty_name_list(self):
        pkg = CaskRecord.model_validate({"token": "x", "name": []}).to_package()
        assert pkg is not None
        assert pkg.full_name == ""

    def test_drops_tokenless(self):
        assert normalize_casks([{"name": ["Nameless"]}]) == []


class TestPackage:
    """Tests for Package behavior."""

    def test_declaration(self):
        assert Package(identifier="wget").declaration == 'brew "wget"'
        assert Package(identifier="vlc", kind=PackageKind.CASK).declaration == 'cask "vlc"'

    def test_keyword(self):
        assert Package(identifier="wget").keyword == "brew"
        assert Package(identifier="vlc", kind=PackageKind.CASK).keyword == "cask"

    def test_frozen(self):
        pkg = Package(identifier="wget")
        with pytest.raises(ValidationError):
            pkg.identifier = "curl"  # type: ignore[misc]

    def test_json_dump(self):
        data = Package(identifier="vlc", kind=PackageKind.CASK).model_dump(mode="json")
        assert data["kind"] == "cask"


class TestReceipt:
    """Tests for adapter receipts."""

    def test_success(self):
        r = Receipt.success("brew", ["brew", "install", "wget"], return_code=0)
        assert r.ok
        assert not r.failed
        assert r.command_line == "brew install wget"

    def test_failure(self):
        r = Receipt.failure("brew", ["brew", "bundle"], error="exit status 1", return_code=1)
        assert r.failed
        assert r.error == "exit status 1"

    def test_from_exit(self):
        ok = Receipt.from_exit("brew", ["brew", "install", "jq"], 0, duration_ms=120)
        assert ok.ok
        assert ok.duration_ms == 120

        bad = Receipt.from_exit("brew", ["brew", "install", "jq"], 2)
        assert bad.failed
        assert bad.return_code == 2
        assert bad.error == "exit status 2"
