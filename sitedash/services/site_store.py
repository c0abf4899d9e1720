"""File-backed storage for site records.

Each site lives in its own ``site-<slug>.yml`` file inside the data
directory.  ``sites.json`` in the same directory is a derived index that is
rebuilt from scratch by :meth:`SiteStore.generate_index`.

Writes are full-file overwrites with no locking: two concurrent writers to
the same file race and the last one wins.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

import yaml

from sitedash.errors import (
    SiteAlreadyExistsError,
    SiteEmptyError,
    SiteNotFoundError,
    SiteStorageError,
    SiteValidationError,
)
from sitedash.models.site import DeleteResult, SiteIndex
from sitedash.services.filenames import is_site_filename, resolve_path, slugify
from sitedash.services.validator import validate_site

logger = logging.getLogger(__name__)

INDEX_FILENAME = "sites.json"
RULES_FILENAME = "dashboard-new-site.mdc"


class _SiteDumper(yaml.SafeDumper):
    """Emit double quotes wherever the default emitter would pick single quotes."""

    def choose_scalar_style(self):
        style = super().choose_scalar_style()
        return '"' if style == "'" else style


def iso_timestamp() -> str:
    """Current UTC time as ``2024-01-31T12:00:00.000Z``."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def dump_site(record: Dict[str, Any]) -> str:
    return yaml.dump(
        record,
        Dumper=_SiteDumper,
        indent=2,
        width=float("inf"),
        allow_unicode=True,
        sort_keys=False,
        default_flow_style=False,
    )


def _check(record: Dict[str, Any]) -> None:
    errors = validate_site(record)
    if errors:
        raise SiteValidationError(errors)


class SiteStore:
    """CRUD operations over the site files of one data directory."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)

    def list_sites(self) -> List[str]:
        try:
            entries = [entry.name for entry in self.data_dir.iterdir()]
        except OSError as exc:
            logger.error("Failed to list sites", extra={"data_dir": str(self.data_dir)})
            raise SiteStorageError("Failed to list sites") from exc
        return sorted(name for name in entries if is_site_filename(name))

    def generate_index(self) -> SiteIndex:
        sites = self.list_sites()
        index = SiteIndex(sites=sites, generated_at=iso_timestamp())
        payload = json.dumps(index.model_dump(by_alias=True), indent=2, ensure_ascii=False)

        try:
            (self.data_dir / INDEX_FILENAME).write_text(payload + "\n", encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to write site index: %s", exc)
            raise SiteStorageError("Failed to generate site index") from exc

        logger.info("Site index generated", extra={"count": len(sites)})
        return index

    def get_site(self, identifier: str) -> Dict[str, Any]:
        path = resolve_path(self.data_dir, identifier)
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise SiteNotFoundError(f"Site file not found: {identifier}") from exc
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            logger.error("Failed to read site %s: %s", identifier, exc)
            raise SiteStorageError(f"Failed to read site data: {exc}") from exc

        if not data:
            raise SiteEmptyError(f"Site data is empty: {identifier}")
        return data

    def create_site(self, identifier: str, record: Dict[str, Any]) -> Dict[str, Any]:
        _check(record)
        path = resolve_path(self.data_dir, identifier)
        content = dump_site(record)

        # "x" mode makes the existence check and the create a single call.
        try:
            with path.open("x", encoding="utf-8") as fh:
                fh.write(content)
        except FileExistsError as exc:
            raise SiteAlreadyExistsError(f"Site file already exists: {identifier}") from exc
        except OSError as exc:
            logger.error("Failed to create site %s: %s", identifier, exc)
            raise SiteStorageError(f"Failed to write site data: {exc}") from exc

        logger.info("Site created", extra={"site_file": path.name})
        return record

    def update_site(self, identifier: str, record: Dict[str, Any]) -> Dict[str, Any]:
        _check(record)
        path = resolve_path(self.data_dir, identifier)
        if not path.is_file():
            raise SiteNotFoundError(f"Site file not found: {identifier}")

        try:
            path.write_text(dump_site(record), encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to update site %s: %s", identifier, exc)
            raise SiteStorageError(f"Failed to write site data: {exc}") from exc

        logger.info("Site updated", extra={"site_file": path.name})
        return record

    def delete_site(self, identifier: str) -> DeleteResult:
        path = resolve_path(self.data_dir, identifier)
        try:
            path.unlink()
        except FileNotFoundError as exc:
            raise SiteNotFoundError(f"Site file not found: {identifier}") from exc
        except OSError as exc:
            logger.error("Failed to delete site %s: %s", identifier, exc)
            raise SiteStorageError(f"Failed to delete site: {exc}") from exc

        logger.info("Site deleted", extra={"site_file": path.name})
        return DeleteResult(success=True, filename=identifier)

    def generate_filename(self, name: str) -> str:
        return slugify(name)

    def read_rules(self, filename: str = RULES_FILENAME) -> str:
        """Return the text of a rules document kept alongside the site files."""
        path = self.data_dir / filename
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            logger.warning("Rules file not found", extra={"path": str(path)})
            raise SiteNotFoundError(f"Rules file not found: {path}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Failed to read rules file %s: %s", path, exc)
            raise SiteStorageError(f"Failed to read rules file: {exc}") from exc
