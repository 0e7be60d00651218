"""
Tests for document assembly.
"""

from emd.assembler import DocumentAssembler
from emd.blueprint import Blueprint, BlueprintResource, ResolvedResource
from emd.catalog import EcrDetail, ResourceType
from emd.i18n import Language

from fakes import ec2_detail, network_detail


def ref(kind, resource_id, name=""):
    return BlueprintResource(resource_type=kind, region="ap-northeast-2",
                             resource_id=resource_id, resource_name=name)


def test_single_detail_has_title_and_no_toc():
    """A single detail gets a title and its section only."""
    document = DocumentAssembler().render(ec2_detail("i-1", "web-1"))
    assert document.text.startswith("# web-1\n")
    assert "## EC2 Instance (web-1)" in document.text
    assert "Table of Contents" not in document.text
    assert document.skipped == []


def test_blueprint_sections_in_stored_order():
    """Sections follow blueprint order and the TOC links to anchors."""
    resources = [ref(ResourceType.ECR, "repo-a"), ref(ResourceType.EC2, "i-1", "web-1"),
                 ref(ResourceType.NETWORK, "vpc-1")]
    blueprint = Blueprint(name="prod", resources=resources)
    resolved = [
        ResolvedResource(resources[0], detail=EcrDetail(name="repo-a")),
        ResolvedResource(resources[1], detail=ec2_detail("i-1", "web-1")),
        ResolvedResource(resources[2], detail=network_detail("vpc-1")),
    ]

    document = DocumentAssembler().render(blueprint, resolved)
    text = document.text

    assert text.startswith("# prod\n")
    assert "## Table of Contents" in text
    assert "1. [ECR: repo-a](#resource-1)" in text
    assert "3. [Network: main](#resource-3)" in text
    positions = [text.index(h) for h in ("## ECR Repository", "## EC2 Instance", "## VPC")]
    assert positions == sorted(positions)
    assert document.section_count == 3


def test_failed_entries_are_skipped_and_recorded():
    """Failed resources are left out without aborting the rest."""
    resources = [ref(ResourceType.EC2, "i-1", "web-1"), ref(ResourceType.EC2, "i-9", "gone"),
                 ref(ResourceType.ECR, "repo-a")]
    resolved = [
        ResolvedResource(resources[0], detail=ec2_detail("i-1", "web-1")),
        ResolvedResource(resources[1], error="InvalidInstanceID.NotFound"),
        ResolvedResource(resources[2], detail=EcrDetail(name="repo-a")),
    ]
    assembler = DocumentAssembler()
    document = assembler.render_blueprint(Blueprint(name="prod", resources=resources), resolved)

    assert document.section_count == 2
    assert document.skipped == [resources[1]]
    assert "i-9" not in document.text
    assert assembler.skipped_message(document) == "Skipped 1 resource(s): gone (i-9)"


def test_one_section_has_no_toc():
    """A single section needs no table of contents."""
    resource = ref(ResourceType.ECR, "repo-a")
    document = DocumentAssembler(Language.KOREAN).render_blueprint(
        Blueprint(name="one", resources=[resource]),
        [ResolvedResource(resource, detail=EcrDetail(name="repo-a"))],
    )
    assert "목차" not in document.text
    assert "## ECR 리포지토리 (repo-a)" in document.text
    assert DocumentAssembler().skipped_message(document) == ""
