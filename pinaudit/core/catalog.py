"""Engine catalog — filesystem access to the ``engines/`` tree.

Each engine is a directory holding ``env.json`` (its pin descriptor) and
``build.sh`` (its build script).  Missing files mean "nothing to check"
and are reported as None, never as errors.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from pinaudit.models.engine import EngineDescriptor

logger = logging.getLogger(__name__)

DESCRIPTOR_FILENAME = "env.json"
BUILD_SCRIPT_FILENAME = "build.sh"


class CatalogError(RuntimeError):
    """Raised when the engine tree or an engine's descriptor cannot be read."""


class EngineCatalog:
    """Reads engines from a root directory.

    Parameters
    ----------
    root:
        Directory containing one subdirectory per engine.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def engine_names(self) -> list[str]:
        """Return engine directory names in sorted order.

        Raises
        ------
        CatalogError
            If the root does not exist or cannot be listed.  Without an
            engine list the audit is meaningless.
        """
        try:
            entries = list(self.root.iterdir())
        except OSError as exc:
            raise CatalogError(f"Cannot list engines in {self.root}: {exc}") from exc
        return sorted(entry.name for entry in entries if entry.is_dir())

    def load_descriptor(self, name: str) -> EngineDescriptor | None:
        """Load ``env.json`` for *name*; None when the engine has none."""
        path = self.root / name / DESCRIPTOR_FILENAME
        if not path.is_file():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise CatalogError(f"Unreadable {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise CatalogError(f"{path} is not a JSON object")
        try:
            return EngineDescriptor.model_validate({**data, "name": name})
        except ValidationError as exc:
            raise CatalogError(f"Invalid pin descriptor {path}: {exc}") from exc

    def read_build_script(self, name: str) -> str | None:
        """Return the text of ``build.sh`` for *name*; None when absent."""
        path = self.root / name / BUILD_SCRIPT_FILENAME
        if not path.is_file():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise CatalogError(f"Unreadable {path}: {exc}") from exc
