"""
Startup sequence: open the store and make sure the products table exists.

Runs once, before the HTTP server accepts traffic. There is no retry loop;
any failure that leaves the store unusable is raised to the caller, which is
expected to abort startup.
"""

import logging

from pydantic import BaseModel

from dynamo_toolkit.db import DynamoStore, Store, StoreError, meta, table_schema
from catalog.exceptions import BootstrapError
from catalog.models import Product
from catalog.settings import FATAL, WARN, Settings


logger = logging.getLogger(__name__)

READ_CAPACITY = 10
WRITE_CAPACITY = 10


def ensure_table(store: Store,
                 model: type[BaseModel] = Product,
                 read_capacity: int = READ_CAPACITY,
                 write_capacity: int = WRITE_CAPACITY,
                 on_create_failure: str = FATAL) -> bool:
    """Create the model's table when the store does not have it yet.

    Args:
        store: Store to inspect and, if needed, create the table in
        model: Described model whose table is required
        read_capacity: Provisioned read capacity for a new table
        write_capacity: Provisioned write capacity for a new table
        on_create_failure: ``fatal`` raises when CreateTable fails,
            ``warn`` logs the failure and lets startup continue

    Returns:
        True when the table was created by this call

    Raises:
        BootstrapError: Listing tables failed, or CreateTable failed under
            the ``fatal`` policy
    """
    if on_create_failure not in (FATAL, WARN):
        raise ValueError(f'unknown create failure policy: {on_create_failure!r}')

    name = meta(model).name
    try:
        table_names = store.list_table_names()
    except StoreError as error:
        raise BootstrapError(f'listing tables failed: {error}', original_error=error) from error

    logger.debug(f"Tables: {', '.join(table_names) or '(none)'}")

    if name in table_names:
        logger.info(f"Table '{name}' already exists")
        return False

    logger.info(f"Creating table '{name}'...")
    try:
        store.create_table(table_schema(model, read_capacity, write_capacity))
    except StoreError as error:
        if on_create_failure == FATAL:
            raise BootstrapError(f"creating table '{name}' failed: {error}", original_error=error,
                                 context={'table_name': name}) from error
        logger.error(f"Creating table '{name}' failed, serving anyway: {error}")
        return False

    logger.info(f"Table '{name}' successfully created")
    return True


def bootstrap(settings: Settings) -> DynamoStore:
    """Connect to DynamoDB with the configured credentials and ensure the table."""
    aws = settings.aws
    logger.info(f"Initializing database in {aws.region}...")
    try:
        store = DynamoStore.connect(
            aws.region,
            aws.access_key_id,
            aws.secret_access_key_id,
            endpoint_url=aws.endpoint_url,
            connect_timeout=aws.connect_timeout,
            read_timeout=aws.read_timeout,
            wait_for_table=settings.table.wait_for_table,
        )
    except StoreError as error:
        raise BootstrapError(f'opening a DynamoDB session failed: {error}', original_error=error) from error

    ensure_table(
        store,
        read_capacity=settings.table.read_capacity,
        write_capacity=settings.table.write_capacity,
        on_create_failure=settings.table.on_create_failure,
    )
    logger.info("Database ready")
    return store
