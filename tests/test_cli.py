"""
Tests for the click command line.
"""

from unittest.mock import patch

from click.testing import CliRunner

from emd import __version__, store
from emd.blueprint import Blueprint, BlueprintResource, BlueprintStore
from emd.catalog import ResourceType
from emd.cli import main

from fakes import FakeProvider, sample_details


def _save_prod():
    store.save_blueprints(BlueprintStore(blueprints=[Blueprint(name="prod", resources=[
        BlueprintResource(resource_type=ResourceType.EC2, region="ap-northeast-2",
                          resource_id="i-1", resource_name="web-1"),
        BlueprintResource(resource_type=ResourceType.ECR, region="ap-northeast-2", resource_id="repo-gone"),
    ])]))


def test_version(emd_home):
    """version prints the package version."""
    result = CliRunner().invoke(main, ["version"])
    assert result.exit_code == 0
    assert result.output.strip() == __version__


def test_blueprints_listing(emd_home):
    """Stored blueprints are listed with their sizes."""
    runner = CliRunner()
    assert "No blueprints" in runner.invoke(main, ["blueprints"]).output

    _save_prod()
    result = runner.invoke(main, ["blueprints"])
    assert result.exit_code == 0
    assert "prod\t2 resource(s)" in result.output


def test_export_unknown_blueprint(emd_home):
    """Exporting a missing blueprint exits with an error."""
    with patch("emd.cli.AwsProvider", return_value=FakeProvider()):
        result = CliRunner().invoke(main, ["export", "nope"])
    assert result.exit_code == 1
    assert "Blueprint not found: nope" in result.output


def test_export_writes_document(emd_home, tmp_path):
    """Export resolves every entry, skips failures and writes the file."""
    _save_prod()
    output = tmp_path / "docs" / "prod.md"
    provider = FakeProvider(details=sample_details())

    with patch("emd.cli.AwsProvider", return_value=provider):
        result = CliRunner().invoke(main, ["--region", "us-east-1", "export", "prod", "-o", str(output)])

    assert result.exit_code == 0, result.output
    text = output.read_text(encoding="utf-8")
    assert text.startswith("# prod\n")
    assert "## EC2 Instance (web-1)" in text
    assert "Skipped ecr repo-gone" in result.output
    assert f"Wrote {output.resolve()}" in result.output
    assert ("detail", ResourceType.EC2, "i-1", "ap-northeast-2") in provider.calls


def test_log_file_created(emd_home):
    """Every invocation logs to the home directory."""
    CliRunner().invoke(main, ["version"])
    assert (emd_home / "emd.log").exists()
