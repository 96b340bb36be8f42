# File: axumgen/migrations.py
"""
axumgen - Migration Registry & Schema Sync
===========================================
Decides whether an entity's table-creation migration must be written, and
runs the optional schema-sync tool once all migrations exist.

Migration directories are named::

    migrations/<stable_timestamp>_create_<table_name>/{up,down}.sql

``stable_timestamp`` is the entity's change-log date, so regenerating the
same entity always targets the same directory.

``should_create`` scans ``migrations/`` and treats *any* directory whose
name contains ``create_<table_name>`` as an existing migration for the
table.  This is a substring test: a table ``order`` is considered migrated
as soon as ``..._create_order_item`` exists.  ``axumgen.validators`` warns
about such table-name pairs.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from axumgen.manifests import MIGRATIONS_DIR
from axumgen.models import EntityDescriptor
from axumgen.utils import ensure_directory

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("axumgen.migrations")


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class MigrationRegistry:
    """Filesystem view of the destination's ``migrations/`` directory."""

    def __init__(self, destination: Path) -> None:
        self.destination: Path = destination
        self.migrations_dir: Path = destination / MIGRATIONS_DIR

    @staticmethod
    def directory_name(entity: EntityDescriptor) -> str:
        return f"{entity.stable_timestamp}_create_{entity.table_name}"

    def record_path(self, entity: EntityDescriptor) -> str:
        """Destination-relative migration directory for *entity*."""
        return f"{MIGRATIONS_DIR}/{self.directory_name(entity)}"

    def existing(self) -> List[str]:
        """Sorted names of the directories currently under ``migrations/``."""
        if not self.migrations_dir.is_dir():
            return []
        return sorted(p.name for p in self.migrations_dir.iterdir() if p.is_dir())

    def should_create(self, entity: EntityDescriptor) -> bool:
        """
        False when some existing migration directory mentions
        ``create_<table_name>``.

        Once the migration has been written this returns False for the same
        entity, so repeated runs never duplicate it.
        """
        needle: str = f"create_{entity.table_name}"
        for name in self.existing():
            if needle in name:
                logger.info(
                    "Migration for %s already exists (%s), skipping.",
                    entity.entity_class,
                    name,
                )
                return False
        return True


# ---------------------------------------------------------------------------
# Schema sync tool
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ToolOutcome:
    """Result of one schema-sync invocation."""

    ran: bool
    success: bool
    returncode: Optional[int] = None
    message: str = ""


DEFAULT_SYNC_COMMAND: Sequence[str] = ("diesel", "migration", "run")


class SchemaSyncTool:
    """
    Runs the schema-sync command (``diesel migration run``) in the
    destination directory so that ``schema.rs`` picks up new tables.

    Never raises: a missing executable or a non-zero exit status becomes a
    failed ``ToolOutcome`` the caller records as a warning.
    """

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_SYNC_COMMAND,
        timeout: Optional[float] = 300.0,
    ) -> None:
        self.command: List[str] = list(command)
        self.timeout: Optional[float] = timeout

    def run(self, destination: Path) -> ToolOutcome:
        if not (destination / MIGRATIONS_DIR).is_dir():
            logger.debug("No migrations directory in %s; schema sync not needed.", destination)
            return ToolOutcome(ran=False, success=True, message="no migrations directory")

        ensure_directory(destination / "target" / "db")
        logger.info("Running '%s' in %s ...", " ".join(self.command), destination)

        try:
            completed = subprocess.run(
                self.command,
                cwd=str(destination),
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            message: str = (
                f"Could not run '{' '.join(self.command)}' ({exc}); "
                f"run it manually in {destination}"
            )
            logger.warning(message)
            return ToolOutcome(ran=False, success=False, message=message)

        if completed.returncode == 0:
            logger.info("Schema sync completed.")
            return ToolOutcome(ran=True, success=True, returncode=0, message="ok")

        message = (
            f"'{' '.join(self.command)}' exited with status {completed.returncode}"
        )
        stderr: str = (completed.stderr or "").strip()
        if stderr:
            message = f"{message}: {stderr}"
        logger.warning(message)
        return ToolOutcome(
            ran=True, success=False, returncode=completed.returncode, message=message
        )


__all__: List[str] = [
    "MigrationRegistry",
    "ToolOutcome",
    "DEFAULT_SYNC_COMMAND",
    "SchemaSyncTool",
]

logger.debug("axumgen.migrations loaded — %d public symbols.", len(__all__))
