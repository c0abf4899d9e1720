"""Filename utilities: map site identifiers and names to ``site-*.yml`` files."""

import re
from pathlib import Path

from sitedash.errors import SiteValidationError

SITE_PREFIX = "site-"
SITE_SUFFIX = ".yml"


def resolve_path(data_dir: Path, identifier: str) -> Path:
    """Return the on-disk path of the site file addressed by *identifier*.

    ``"foo"``, ``"foo.yml"`` and ``"site-foo.yml"`` all resolve to
    ``<data_dir>/site-foo.yml``.

    Raises:
        SiteValidationError: if *identifier* would escape the data directory.
    """
    if "/" in identifier or "\\" in identifier or identifier in (".", ".."):
        raise SiteValidationError([f"Invalid site filename: {identifier!r}"])

    filename = identifier
    if not filename.endswith(SITE_SUFFIX):
        filename = f"{filename}{SITE_SUFFIX}"
    if not filename.startswith(SITE_PREFIX):
        filename = f"{SITE_PREFIX}{filename}"
    return Path(data_dir) / filename


def slugify(name: str) -> str:
    """Turn a human-readable site name into a ``site-<slug>.yml`` filename.

    Names made only of symbols or whitespace yield ``site-.yml``.
    """
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower())
    slug = slug.strip("-")
    return f"{SITE_PREFIX}{slug}{SITE_SUFFIX}"


def is_site_filename(filename: str) -> bool:
    return filename.startswith(SITE_PREFIX) and filename.endswith(SITE_SUFFIX)
