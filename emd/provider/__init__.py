"""
Resource providers: the interface and its boto3 implementation.
"""

from .aws import AwsProvider
from .base import ResourceProvider

__all__ = ["AwsProvider", "ResourceProvider"]
