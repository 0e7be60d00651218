"""
Persistence for settings, blueprints and exported documents.
"""

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError as SchemaError

from .blueprint import BlueprintStore
from .config import Settings, get_emd_home
from .errors import PersistenceError

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.json"
BLUEPRINTS_FILE = "blueprints.json"


def get_settings_path() -> Path:
    return get_emd_home() / SETTINGS_FILE


def get_blueprints_path() -> Path:
    return get_emd_home() / BLUEPRINTS_FILE


def _read_json(path: Path) -> Optional[Dict[str, Any]]:
    """
    Read a JSON object from path.

    Returns:
        Parsed object, or None if the file is missing or unreadable
    """
    if not path.exists():
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read {path}: {e}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"Ignoring {path}: expected a JSON object")
        return None
    return data


def _write_json(path: Path, data: Dict[str, Any]) -> None:
    """
    Atomically write a JSON object to path.

    The data goes to a temporary file in the same directory which then
    replaces the target, so a failed write leaves the old file intact.

    Raises:
        PersistenceError: If the file cannot be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
                f.flush()
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise PersistenceError(f"Failed to write {path}: {e}") from e


def load_settings() -> Settings:
    """
    Load user settings.

    Returns:
        Settings: Stored settings, or defaults when missing or invalid
    """
    data = _read_json(get_settings_path())
    if data is None:
        return Settings()

    try:
        return Settings.model_validate(data)
    except SchemaError as e:
        logger.warning(f"Invalid settings file, using defaults: {e}")
        return Settings()


def save_settings(settings: Settings) -> None:
    """
    Save user settings.

    Raises:
        PersistenceError: If the file cannot be written
    """
    _write_json(get_settings_path(), settings.model_dump(mode="json"))
    logger.debug("Settings saved")


def load_blueprints() -> BlueprintStore:
    """
    Load all blueprints.

    Returns:
        BlueprintStore: Stored blueprints in their saved order, or an empty
        store when the file is missing or invalid
    """
    data = _read_json(get_blueprints_path())
    if data is None:
        return BlueprintStore()

    try:
        return BlueprintStore.model_validate(data)
    except SchemaError as e:
        logger.error(f"Invalid blueprints file, starting empty: {e}")
        return BlueprintStore()


def save_blueprints(store: BlueprintStore) -> None:
    """
    Save all blueprints.

    Raises:
        PersistenceError: If the file cannot be written
    """
    _write_json(get_blueprints_path(), store.model_dump(mode="json"))
    logger.debug(f"Saved {len(store.blueprints)} blueprint(s)")


_UNSAFE_CHARS = re.compile(r"[^\w.\-]+")


def default_document_name(name: str, resource_id: str = "") -> str:
    """
    Derive a Markdown file name from a resource or blueprint name.

    Args:
        name: Display name (may be empty)
        resource_id: Fallback when name is empty

    Returns:
        File name ending in .md
    """
    base = name.strip() or resource_id.strip() or "document"
    # ARNs are long; keep the last path segment
    if base.startswith("arn:"):
        base = base.rsplit("/", 1)[-1] or base
    safe = _UNSAFE_CHARS.sub("_", base).strip("_") or "document"
    return f"{safe}.md"


def save_document(path: str, content: str) -> Path:
    """
    Write an exported Markdown document.

    Args:
        path: Destination path
        content: Document text

    Returns:
        Path: Resolved path that was written

    Raises:
        PersistenceError: If the file cannot be written
    """
    target = Path(path).expanduser()
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        raise PersistenceError(f"Failed to save document {target}: {e}") from e

    logger.info(f"Document saved to {target}")
    return target.resolve()
