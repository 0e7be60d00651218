"""
ECR repository listing and detail.
"""

from typing import Any, Dict, List

from ..catalog import AwsResource, EcrDetail
from ..errors import NotFoundError
from .common import format_date


def mutability_label(tag_mutability: str) -> str:
    return "Immutable" if tag_mutability == "IMMUTABLE" else "Mutable"


def parse_repository_list(repositories: List[Dict[str, Any]]) -> List[AwsResource]:
    return [
        AwsResource(name=repo["repositoryName"], id=repo["repositoryName"])
        for repo in repositories
    ]


def list_repositories(ecr) -> List[AwsResource]:
    repositories = []
    for page in ecr.get_paginator("describe_repositories").paginate():
        repositories.extend(page.get("repositories", []))
    return parse_repository_list(repositories)


def parse_repository_detail(repo: Dict[str, Any], image_count: int) -> EcrDetail:
    encryption = repo.get("encryptionConfiguration", {})
    return EcrDetail(
        name=repo["repositoryName"],
        uri=repo.get("repositoryUri", ""),
        tag_mutability=mutability_label(repo.get("imageTagMutability", "")),
        encryption_type=encryption.get("encryptionType", "AES256"),
        kms_key=encryption.get("kmsKey"),
        created_at=format_date(repo.get("createdAt")),
        image_count=image_count,
    )


def get_repository_detail(ecr, name: str) -> EcrDetail:
    repositories = ecr.describe_repositories(repositoryNames=[name]).get("repositories", [])
    if not repositories:
        raise NotFoundError(f"Repository {name} not found")

    image_count = 0
    for page in ecr.get_paginator("list_images").paginate(repositoryName=name):
        image_count += len(page.get("imageIds", []))

    return parse_repository_detail(repositories[0], image_count)
