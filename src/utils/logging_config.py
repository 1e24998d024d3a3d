import logging
import os

from paths import LOGS_DIR


def setup_logging():
    """Configure logging for the project"""
    os.makedirs(LOGS_DIR, exist_ok=True)
    level = getattr(logging, (os.getenv('LOG_LEVEL') or 'INFO').upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(os.path.join(LOGS_DIR, 'scraper.log'), encoding='utf-8'),
            logging.StreamHandler()
        ]
    )
    return logging.getLogger(__name__)
