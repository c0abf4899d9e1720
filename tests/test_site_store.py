"""Tests for sitedash.services.site_store.SiteStore against a temporary directory."""

import json

import pytest
import yaml

from sitedash.errors import (
    SiteAlreadyExistsError,
    SiteEmptyError,
    SiteNotFoundError,
    SiteStorageError,
    SiteValidationError,
)
from sitedash.services.site_store import SiteStore, dump_site


@pytest.fixture
def store(tmp_path):
    return SiteStore(tmp_path)


def _site(name: str = "Example", **extra) -> dict:
    return {"name": name, "url": "https://example.com", **extra}


class TestCreateAndGet:
    def test_round_trip(self, store):
        record = _site(links=[{"title": "Docs", "url": "https://docs.example.com"}], tags=["a"])
        assert store.create_site("example", record) is record
        assert store.get_site("example") == record

    def test_create_writes_prefixed_file(self, store, tmp_path):
        store.create_site("example", _site())
        assert (tmp_path / "site-example.yml").is_file()

    def test_get_accepts_full_filename(self, store):
        store.create_site("example", _site())
        assert store.get_site("site-example.yml")["name"] == "Example"

    def test_create_existing_raises(self, store):
        store.create_site("example", _site())
        with pytest.raises(SiteAlreadyExistsError):
            store.create_site("site-example.yml", _site("Other"))

    def test_create_existing_keeps_original_content(self, store):
        store.create_site("example", _site())
        with pytest.raises(SiteAlreadyExistsError):
            store.create_site("example", _site("Other"))
        assert store.get_site("example")["name"] == "Example"

    def test_create_invalid_lists_every_violation(self, store, tmp_path):
        with pytest.raises(SiteValidationError) as excinfo:
            store.create_site("broken", {"tags": "nope"})
        assert len(excinfo.value.errors) == 3
        assert not (tmp_path / "site-broken.yml").exists()

    def test_get_missing_raises_not_found(self, store):
        with pytest.raises(SiteNotFoundError):
            store.get_site("missing")

    def test_get_empty_file_raises_empty(self, store, tmp_path):
        (tmp_path / "site-empty.yml").write_text("", encoding="utf-8")
        with pytest.raises(SiteEmptyError):
            store.get_site("empty")

    def test_get_empty_mapping_raises_empty(self, store, tmp_path):
        (tmp_path / "site-blank.yml").write_text("{}\n", encoding="utf-8")
        with pytest.raises(SiteEmptyError):
            store.get_site("blank")

    def test_get_malformed_yaml_raises_storage_error(self, store, tmp_path):
        (tmp_path / "site-bad.yml").write_text("name: [unclosed\n", encoding="utf-8")
        with pytest.raises(SiteStorageError):
            store.get_site("bad")

    def test_get_undecodable_file_raises_storage_error(self, store, tmp_path):
        (tmp_path / "site-bad.yml").write_bytes(b"name: \xff\xfe\n")
        with pytest.raises(SiteStorageError):
            store.get_site("bad")


class TestUpdate:
    def test_update_overwrites_whole_record(self, store):
        store.create_site("example", _site(tags=["old"]))
        store.update_site("example", _site("Renamed"))
        assert store.get_site("example") == _site("Renamed")

    def test_update_missing_raises_not_found(self, store):
        with pytest.raises(SiteNotFoundError):
            store.update_site("missing", _site())

    def test_update_validates_before_existence_check(self, store):
        with pytest.raises(SiteValidationError):
            store.update_site("missing", {"name": "x"})


class TestDelete:
    def test_delete_returns_confirmation(self, store, tmp_path):
        store.create_site("example", _site())
        result = store.delete_site("example")
        assert result.success is True
        assert result.filename == "example"
        assert not (tmp_path / "site-example.yml").exists()

    def test_get_after_delete_raises_not_found(self, store):
        store.create_site("example", _site())
        store.delete_site("example")
        with pytest.raises(SiteNotFoundError):
            store.get_site("example")

    def test_delete_missing_raises_not_found(self, store):
        with pytest.raises(SiteNotFoundError):
            store.delete_site("missing")


class TestListAndIndex:
    def test_list_filters_and_sorts(self, store, tmp_path):
        for name in ("c", "a", "b"):
            store.create_site(name, _site(name))
        (tmp_path / "sites.json").write_text("{}", encoding="utf-8")
        (tmp_path / "notes.yml").write_text("x: 1", encoding="utf-8")
        assert store.list_sites() == ["site-a.yml", "site-b.yml", "site-c.yml"]

    def test_list_missing_directory_raises_storage_error(self, tmp_path):
        with pytest.raises(SiteStorageError):
            SiteStore(tmp_path / "nope").list_sites()

    def test_generate_index_writes_sorted_sites(self, store, tmp_path):
        for name in ("a", "c", "b"):
            store.create_site(name, _site(name))

        index = store.generate_index()

        assert index.sites == ["site-a.yml", "site-b.yml", "site-c.yml"]
        assert index.generated_at.endswith("Z")
        raw = (tmp_path / "sites.json").read_text(encoding="utf-8")
        assert raw.endswith("}\n")
        assert '\n  "sites": [' in raw
        assert json.loads(raw) == {
            "sites": ["site-a.yml", "site-b.yml", "site-c.yml"],
            "generatedAt": index.generated_at,
        }

    def test_generate_index_replaces_previous_content(self, store, tmp_path):
        store.create_site("a", _site("a"))
        store.generate_index()
        store.delete_site("a")
        assert store.generate_index().sites == []
        assert json.loads((tmp_path / "sites.json").read_text())["sites"] == []

    def test_generate_index_write_failure_raises_storage_error(self, store, tmp_path):
        (tmp_path / "sites.json").mkdir()
        with pytest.raises(SiteStorageError):
            store.generate_index()


class TestGenerateFilename:
    def test_delegates_to_slugify(self, store):
        assert store.generate_filename("My Site!!") == "site-my-site.yml"


class TestDumpSite:
    def test_keeps_key_order(self):
        text = dump_site({"url": "https://example.com", "name": "Example"})
        assert text.index("url") < text.index("name")

    def test_quoted_scalars_use_double_quotes(self):
        text = dump_site({"name": "yes", "url": "https://example.com"})
        assert 'name: "yes"' in text
        assert "'" not in text

    def test_long_values_stay_on_one_line(self):
        description = " ".join(["word"] * 60)
        text = dump_site({"description": description})
        assert f"description: {description}\n" == text

    def test_unicode_is_written_verbatim(self):
        assert "站点" in dump_site({"name": "站点"})

    def test_output_loads_back(self):
        record = _site(tags=["yes", "1.0", "null"], count=3)
        assert yaml.safe_load(dump_site(record)) == record


class TestReadRules:
    def test_returns_file_text(self, store, tmp_path):
        (tmp_path / "dashboard-new-site.mdc").write_text("# Rules\n", encoding="utf-8")
        assert store.read_rules() == "# Rules\n"

    def test_missing_rules_raise_not_found(self, store):
        with pytest.raises(SiteNotFoundError):
            store.read_rules()

    def test_undecodable_rules_raise_storage_error(self, store, tmp_path):
        (tmp_path / "dashboard-new-site.mdc").write_bytes(b"\xff\xfe rules")
        with pytest.raises(SiteStorageError):
            store.read_rules()
