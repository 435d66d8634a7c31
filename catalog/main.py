"""
Run the products catalog API.

Usage:
    python -m catalog
    python -m catalog --config ./config.json
    catalog-api --log-level debug
"""

import argparse
import logging

import uvicorn

from dynamo_toolkit.db import StoreError
from catalog.api import create_app
from catalog.bootstrap import bootstrap
from catalog.exceptions import BootstrapError, ConfigurationError
from catalog.settings import load_settings


logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Run the products catalog API')
    parser.add_argument(
        '--config',
        default=None,
        help='Path to the JSON config file (default: $CATALOG_CONFIG or ./config.json)',
    )
    parser.add_argument(
        '--log-level',
        default=None,
        choices=['debug', 'info', 'warning', 'error'],
        help='Log level (default: logger_level from the config file)',
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigurationError as error:
        logging.basicConfig(format=LOG_FORMAT)
        logger.critical(f"Error setting up config, make sure it's at the specified path: {error}")
        return 1

    level = (args.log_level or settings.logger_level).upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)

    try:
        store = bootstrap(settings)
    except (BootstrapError, StoreError) as error:
        logger.critical(f"Error initializing database: {error}")
        return 1

    router = settings.router
    logger.info(f"Serving on {router.host}:{router.port_number}")
    uvicorn.run(create_app(store), host=router.host, port=router.port_number, log_level=level.lower())
    return 0
