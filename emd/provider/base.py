"""
Resource Provider interface.
"""

from abc import ABC, abstractmethod
from typing import List

from ..catalog import AwsResource, ResourceDetail, ResourceType
from ..config import ProviderSettings
from ..plan import NetworkStep, PartialNetworkDetail


class ResourceProvider(ABC):
    """
    Fetches resource lists and details for one region at a time.

    Every method either returns a parsed value or raises ProviderError;
    implementations must not leak SDK exceptions. Calls are made from a
    worker thread, with the configuration passed in explicitly.
    """

    @abstractmethod
    def check_login(self, settings: ProviderSettings) -> str:
        """Return a description of the authenticated identity."""
        pass

    @abstractmethod
    def list(self, kind: ResourceType, settings: ProviderSettings) -> List[AwsResource]:
        """List resources of one kind."""
        pass

    @abstractmethod
    def detail(self, kind: ResourceType, resource_id: str, settings: ProviderSettings) -> ResourceDetail:
        """Fetch the full detail of one resource; networks go through detail_step."""
        pass

    @abstractmethod
    def detail_step(self, vpc_id: str, step: NetworkStep, settings: ProviderSettings) -> PartialNetworkDetail:
        """Fetch one step of a network detail."""
        pass
