"""Run the API server: ``python -m users_api``."""

import logging
import sys

import uvicorn
from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from users_api.config import UNSUPPORTED_DB_TYPE_MESSAGE, get_settings
from users_api.logging_config import configure_logging
from users_api.main import create_app

logger = logging.getLogger("users_api")


def main() -> None:
    env_path = find_dotenv(usecwd=True)
    if env_path:
        load_dotenv(env_path)

    try:
        settings = get_settings()
    except ValidationError as exc:
        configure_logging()
        if any(error["loc"] == ("db_type",) for error in exc.errors()):
            logger.critical(UNSUPPORTED_DB_TYPE_MESSAGE)
        else:
            logger.critical("Invalid configuration: %s", exc)
        sys.exit(1)

    configure_logging(settings)
    if not env_path:
        logger.info("No .env file found, using system environment variables")

    logger.info("Starting %s on port %d", settings.app_name, settings.port)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    main()
