from .db import (
    DynamoStore,
    Store,
    StoreError,
    TableDescriptor,
    from_item,
    meta,
    table,
    table_schema,
    to_item,
)
