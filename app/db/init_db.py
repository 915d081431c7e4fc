import logging

from app.core.logging import configure_logging
from app.db.session import create_db_and_tables, engine

logger = logging.getLogger(__name__)


def main() -> None:
    configure_logging()
    logger.info("Creating tables on %s", engine.url.render_as_string(hide_password=True))
    create_db_and_tables()
    logger.info("Database tables ready")


if __name__ == "__main__":
    main()
