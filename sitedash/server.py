"""Process entrypoint: ``python -m sitedash.server`` or the ``sitedash`` script."""

import logging

import uvicorn

from sitedash.config import get_settings
from sitedash.main import app

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()
    settings.data_dir.mkdir(parents=True, exist_ok=True)

    options = {"host": settings.host, "port": settings.port, "log_config": None}
    scheme = "http"
    if settings.https_enabled:
        options["ssl_keyfile"] = str(settings.ssl_key_path)
        options["ssl_certfile"] = str(settings.ssl_cert_path)
        scheme = "https"

    logger.info(
        "Starting site dashboard server on %s://%s:%s (env=%s, data_dir=%s)",
        scheme,
        settings.host,
        settings.port,
        settings.app_env,
        settings.data_dir.resolve(),
    )
    uvicorn.run(app, **options)


if __name__ == "__main__":
    main()
