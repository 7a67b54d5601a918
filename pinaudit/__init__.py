"""pinaudit: staleness audit for pinned engine builds.

Reads each engine's pin (``env.json``) and build script (``build.sh``),
asks the upstream host for its latest tag and commit, and reports the
engines that have fallen behind as a CI job matrix.
"""

__version__ = "0.1.0"

from pinaudit.config import AuditConfig
from pinaudit.core.runner import AuditRunner

__all__ = ["AuditConfig", "AuditRunner", "__version__"]
