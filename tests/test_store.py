"""
Tests for settings, blueprint and document persistence.
"""

import json
from unittest.mock import patch

import pytest

from emd import store
from emd.blueprint import Blueprint, BlueprintResource, BlueprintStore
from emd.catalog import ResourceType
from emd.config import ProviderConfig, ProviderSettings, Settings, get_emd_home
from emd.errors import PersistenceError
from emd.i18n import Language


def _store():
    return BlueprintStore(blueprints=[
        Blueprint(name="prod", resources=[
            BlueprintResource(resource_type=ResourceType.EC2, region="ap-northeast-2",
                              resource_id="i-2", resource_name="web-2"),
            BlueprintResource(resource_type=ResourceType.NETWORK, region="us-east-1",
                              resource_id="vpc-1"),
        ]),
        Blueprint(name="empty"),
    ])


class TestBlueprints:
    """Tests for blueprints.json."""

    def test_round_trip(self, emd_home):
        """Saving then loading gives an equal, equally ordered store."""
        original = _store()
        store.save_blueprints(original)
        loaded = store.load_blueprints()
        assert loaded == original
        assert [r.resource_id for r in loaded.blueprints[0].resources] == ["i-2", "vpc-1"]

    def test_missing_file_is_empty(self, emd_home):
        """No file means no blueprints."""
        assert store.load_blueprints().blueprints == []

    def test_unknown_fields_ignored(self, emd_home):
        """Extra fields written by other versions do not break loading."""
        emd_home.mkdir(parents=True)
        (emd_home / "blueprints.json").write_text(json.dumps({
            "version": 3,
            "blueprints": [{
                "name": "prod",
                "color": "red",
                "resources": [{
                    "resource_type": "ecr", "region": "ap-northeast-2",
                    "resource_id": "repo-a", "resource_name": "repo-a", "pinned": True,
                }],
            }],
        }))
        loaded = store.load_blueprints()
        assert loaded.blueprints[0].resources[0].resource_type == ResourceType.ECR

    def test_corrupt_file_is_not_fatal(self, emd_home):
        """Invalid JSON loads as an empty store."""
        emd_home.mkdir(parents=True)
        (emd_home / "blueprints.json").write_text("{not json")
        assert store.load_blueprints().blueprints == []

    def test_undecodable_file_is_not_fatal(self, emd_home):
        """Bytes that are not UTF-8 load as empty blueprints and default settings."""
        emd_home.mkdir(parents=True)
        (emd_home / "blueprints.json").write_bytes(b'{"blueprints": [{"name": "\xff\xfe"}]}')
        (emd_home / "settings.json").write_bytes(b"\xff\xfe")
        assert store.load_blueprints().blueprints == []
        assert store.load_settings() == Settings()

    def test_failed_write_keeps_old_file(self, emd_home):
        """A failing replace raises PersistenceError and leaves the previous file."""
        store.save_blueprints(_store())
        before = (emd_home / "blueprints.json").read_text()

        with patch("emd.store.os.replace", side_effect=OSError("read-only")):
            with pytest.raises(PersistenceError):
                store.save_blueprints(BlueprintStore())

        assert (emd_home / "blueprints.json").read_text() == before
        assert [p.name for p in emd_home.iterdir()] == ["blueprints.json"]


class TestSettings:
    """Tests for settings.json."""

    def test_defaults_and_round_trip(self, emd_home):
        """Missing settings give defaults; saved ones come back."""
        assert store.load_settings() == Settings()
        store.save_settings(Settings(language=Language.KOREAN, default_region_index=3))
        loaded = store.load_settings()
        assert loaded.language == Language.KOREAN
        assert loaded.default_region().code == "ap-southeast-1"

    def test_provider_config_starts_in_default_region(self):
        """A bare provider config uses the same region as default settings."""
        assert ProviderConfig().region == Settings().default_region().code
        assert ProviderSettings().region == "ap-northeast-2"

    def test_home_from_environment(self, emd_home):
        """EMD_HOME decides where files go."""
        assert get_emd_home() == emd_home.resolve()


class TestDocuments:
    """Tests for exported documents."""

    def test_default_names(self):
        """Names are made file-system safe."""
        assert store.default_document_name("prod") == "prod.md"
        assert store.default_document_name("my app/v2") == "my_app_v2.md"
        assert store.default_document_name("", "i-1") == "i-1.md"
        assert store.default_document_name(
            "arn:aws:elasticloadbalancing:ap-northeast-2:1:loadbalancer/app/web/abc"
        ) == "abc.md"

    def test_save_document_creates_directories(self, tmp_path):
        """Parent directories are created."""
        path = store.save_document(str(tmp_path / "out" / "doc.md"), "# Title\n")
        assert path.read_text(encoding="utf-8") == "# Title\n"
