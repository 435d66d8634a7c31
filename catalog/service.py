"""
Catalog access: list and insert products against the store.

Every call round-trips to the store; nothing is cached between requests.
"""

import logging

from pydantic import BaseModel, ValidationError

from dynamo_toolkit.db import Store, StoreError, from_item, meta, to_item
from catalog.models import Product


logger = logging.getLogger(__name__)


class Catalog:
    def __init__(self, store: Store, model: type[BaseModel] = Product):
        self.store = store
        self.model = model
        self.table_name = meta(model).name

    def list_all(self) -> list[BaseModel]:
        """Full scan of the table, sorted by price descending.

        Any scan or deserialization failure aborts the whole call; no
        partial results are returned. Ties keep no particular order.
        """
        try:
            products = [from_item(self.model, raw) for raw in self.store.scan_all(self.table_name)]
        except (StoreError, ValidationError) as error:
            raise StoreError('list_all', self.table_name, error) from error

        products.sort(key=lambda product: product.price, reverse=True)
        logger.debug(f"Listed {len(products)} products from '{self.table_name}'")
        return products

    def insert(self, product: BaseModel) -> BaseModel:
        """Put the product keyed on its id, replacing any existing record."""
        try:
            self.store.put_item(self.table_name, to_item(product))
        except (StoreError, TypeError, ValueError) as error:
            raise StoreError('insert', self.table_name, error) from error

        logger.info(f"Stored product {product}")
        return product
