import logging

import uvicorn

from config import Settings, get_settings
from database.init import init_from_env
from utils.logging_config import setup_logging

__all__ = ["main"]


def main(settings: Settings | None = None) -> int:
    """Start the service-order dashboard web server."""

    settings = settings or get_settings()
    if not settings.database_url:
        raise RuntimeError("DATABASE_URL is not set in .env")

    init_from_env(settings.database_url)
    setup_logging(settings)
    logger = logging.getLogger(__name__)

    from app.main import create_app

    app = create_app()
    logger.info("Serving on http://%s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
