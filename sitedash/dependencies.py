from sitedash.config import get_settings
from sitedash.services.site_store import SiteStore


def get_site_store() -> SiteStore:
    # A fresh store per request; nothing is cached between requests.
    return SiteStore(get_settings().data_dir)
