"""
Configuration: home directory, supported regions and the shared provider
configuration cell.
"""

import os
import threading
from dataclasses import dataclass, replace
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from .i18n import Language


def get_emd_home() -> Path:
    """
    Get the emd home directory.

    Returns:
        Path: emd home directory (settings, blueprints and the log file)
    """
    emd_home = os.environ.get("EMD_HOME", str(Path.home() / ".emd"))
    return Path(emd_home).expanduser().resolve()


@dataclass(frozen=True)
class Region:
    """A selectable AWS region with localized display names."""
    code: str
    name_ko: str
    name_en: str

    def name(self, language: Language) -> str:
        if language == Language.KOREAN:
            return self.name_ko
        return self.name_en


REGIONS: List[Region] = [
    Region("ap-northeast-2", "서울", "Seoul"),
    Region("ap-northeast-1", "도쿄", "Tokyo"),
    Region("ap-northeast-3", "오사카", "Osaka"),
    Region("ap-southeast-1", "싱가포르", "Singapore"),
    Region("ap-southeast-2", "시드니", "Sydney"),
    Region("ap-south-1", "뭄바이", "Mumbai"),
    Region("us-east-1", "버지니아", "N. Virginia"),
    Region("us-east-2", "오하이오", "Ohio"),
    Region("us-west-1", "캘리포니아", "N. California"),
    Region("us-west-2", "오레곤", "Oregon"),
    Region("eu-west-1", "아일랜드", "Ireland"),
    Region("eu-central-1", "프랑크푸르트", "Frankfurt"),
]


DEFAULT_REGION = REGIONS[0].code


def region_index(code: str) -> Optional[int]:
    """Return the position of a region code in REGIONS, or None."""
    for index, region in enumerate(REGIONS):
        if region.code == code:
            return index
    return None


@dataclass(frozen=True)
class ProviderSettings:
    """Immutable snapshot of the provider configuration handed to workers."""
    region: str = DEFAULT_REGION
    profile: Optional[str] = None


class ProviderConfig:
    """
    Process-wide provider configuration cell.

    The UI thread writes (region changes, profile selection); worker
    threads only read through snapshot(). Both sides go through the same
    lock, and workers never hold on to the cell itself, only to the
    immutable ProviderSettings value they were given.
    """

    def __init__(self, region: str = DEFAULT_REGION, profile: Optional[str] = None):
        self._lock = threading.Lock()
        self._settings = ProviderSettings(region=region, profile=profile)

    def snapshot(self) -> ProviderSettings:
        with self._lock:
            return self._settings

    def set_region(self, region: str) -> None:
        with self._lock:
            self._settings = replace(self._settings, region=region)

    def set_profile(self, profile: Optional[str]) -> None:
        with self._lock:
            self._settings = replace(self._settings, profile=profile)

    @property
    def region(self) -> str:
        return self.snapshot().region


class Settings(BaseModel):
    """User settings persisted in settings.json. Unknown fields are ignored."""
    model_config = ConfigDict(extra="ignore")

    language: Language = Language.ENGLISH
    default_region_index: int = 0
    export_dir: str = "."

    def default_region(self) -> Region:
        if 0 <= self.default_region_index < len(REGIONS):
            return REGIONS[self.default_region_index]
        return REGIONS[0]
