import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import logging

from khael_apartments.db.bootstrap import add_sample_data
from khael_apartments.db.engine import engine
from khael_apartments.logging_config import setup_logging
from khael_apartments.models.base import Base

setup_logging()
logger = logging.getLogger(__name__)


def main() -> None:
    """
    Insert the sample Abuja apartment (with three placeholder images) into an empty store.
    """
    Base.metadata.create_all(engine)

    try:
        if add_sample_data(engine):
            logger.info("Sample apartment inserted")
        else:
            logger.info("Store already has apartments, nothing inserted")
    except Exception:
        logger.exception("Seeding sample data failed")
        raise


if __name__ == "__main__":
    main()
