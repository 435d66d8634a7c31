import logging
from decimal import Decimal
from functools import partial
from typing import Any, Callable, Iterator, Protocol, TypeVar

import boto3
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel


logger = logging.getLogger(__name__)

Model = TypeVar("Model", bound="BaseModel")


class StoreError(Exception):
    """ A DynamoDB call failed. Carries the operation and table for context. """

    def __init__(self, operation: str, table_name: str | None, original_error: Exception):
        self.operation = operation
        self.table_name = table_name
        self.original_error = original_error
        target = f" on table '{table_name}'" if table_name else ''
        super().__init__(f'{operation}{target} failed: {original_error}')


class TableDescriptor:
    def __init__(self, name: str, partition_key: str):
        self.name = name
        self.partition_key = partition_key


def table(name: str, partition_key: str) -> Callable:
    """ @table('Products', partition_key='id')
    """
    def decorator(model: type[Model]) -> type[Model]:
        model._META = TableDescriptor(name, partition_key)
        return model
    return decorator


def meta(model: type[BaseModel] | BaseModel) -> TableDescriptor:
    if not isinstance(model, type):
        model = type(model)
    if not issubclass(model, BaseModel):
        raise TypeError(f'Invalid Type: {model}')
    descriptor = getattr(model, '_META', None)
    if not isinstance(descriptor, TableDescriptor):
        raise TypeError(f'Missing Table Description: {model.__name__}')
    return descriptor


def _attribute_name(model: type[BaseModel], field_name: str) -> str:
    return model.model_fields[field_name].alias or field_name


def _field_type(model: type[BaseModel], field_name: str) -> str:
    annotation = model.model_fields[field_name].annotation
    if isinstance(annotation, type) and issubclass(annotation, str):
        return 'S'
    if isinstance(annotation, type) and any(issubclass(annotation, type_) for type_ in [int, float, Decimal]):
        return 'N'
    raise TypeError(f'DynamoDB key field `{field_name}` should be either string or numeric')


def table_schema(model: type[BaseModel], read_capacity: int = 10, write_capacity: int = 10) -> dict:
    """ CreateTable arguments for a described model, with provisioned throughput. """
    descriptor = meta(model)
    key = _attribute_name(model, descriptor.partition_key)
    return dict(
        TableName=descriptor.name,
        KeySchema=[{'AttributeName': key, 'KeyType': 'HASH'}],
        AttributeDefinitions=[
            {'AttributeName': key, 'AttributeType': _field_type(model, descriptor.partition_key)},
        ],
        ProvisionedThroughput={
            'ReadCapacityUnits': read_capacity,
            'WriteCapacityUnits': write_capacity,
        },
    )


def _to_native(value: Any) -> Any:
    # boto3 refuses floats
    if isinstance(value, float):
        return Decimal(str(value))
    return value


def to_item(item: BaseModel) -> dict:
    return {key: _to_native(value) for key, value in item.model_dump(by_alias=True).items()}


def from_item(model: type[Model], raw: dict) -> Model:
    return model.model_validate(raw)


class Store(Protocol):
    """ Capabilities the catalog needs from a key-value store. """

    def list_table_names(self) -> list[str]: ...

    def create_table(self, schema: dict) -> None: ...

    def scan_all(self, table_name: str) -> Iterator[dict]: ...

    def put_item(self, table_name: str, item: dict) -> None: ...


class DynamoStore:
    """ Store backed by a low-level boto3 DynamoDB client.

    One instance is shared by every request. boto3 clients are thread safe,
    resources are not, so records are marshalled here with the
    TypeSerializer/TypeDeserializer pair instead of going through a Table.
    """

    serializer = TypeSerializer()
    deserializer = TypeDeserializer()

    def __init__(self, client, wait_for_table: bool = True):
        self.client = client
        self.wait_for_table = wait_for_table

    @classmethod
    def connect(cls, region: str, access_key_id: str, secret_access_key: str, *,
                endpoint_url: str | None = None,
                connect_timeout: float = 5,
                read_timeout: float = 10,
                wait_for_table: bool = True) -> 'DynamoStore':
        try:
            session = boto3.Session(
                aws_access_key_id=access_key_id,
                aws_secret_access_key=secret_access_key,
                region_name=region,
            )
            client = session.client(
                'dynamodb',
                endpoint_url=endpoint_url,
                config=Config(connect_timeout=connect_timeout, read_timeout=read_timeout),
            )
        except (BotoCoreError, ValueError) as error:
            logger.error(f"Failed to create DynamoDB client: {error}")
            raise StoreError('Connect', None, error) from error
        return cls(client, wait_for_table=wait_for_table)

    @staticmethod
    def _call(operation: str, table_name: str | None, function: Callable, **arguments) -> Any:
        try:
            return function(**arguments)
        except (ClientError, BotoCoreError) as error:
            raise StoreError(operation, table_name, error) from error

    def serialize(self, item: dict) -> dict:
        return {key: self.serializer.serialize(value) for key, value in item.items()}

    def deserialize(self, raw: dict) -> dict:
        return {key: self.deserializer.deserialize(value) for key, value in raw.items()}

    def list_table_names(self) -> list[str]:
        function = partial(self._call, 'ListTables', None, self.client.list_tables)
        return list(self.paginate(function, 'TableNames', 'LastEvaluatedTableName', 'ExclusiveStartTableName'))

    def create_table(self, schema: dict) -> None:
        name = schema['TableName']
        self._call('CreateTable', name, self.client.create_table, **schema)
        if self.wait_for_table:
            waiter = self.client.get_waiter('table_exists')
            self._call('WaitForTable', name, waiter.wait, TableName=name)

    def scan_all(self, table_name: str) -> Iterator[dict]:
        function = partial(self._call, 'Scan', table_name, self.client.scan, TableName=table_name)
        for raw in self.paginate(function, 'Items', 'LastEvaluatedKey', 'ExclusiveStartKey'):
            yield self.deserialize(raw)

    def put_item(self, table_name: str, item: dict) -> None:
        self._call('PutItem', table_name, self.client.put_item, TableName=table_name, Item=self.serialize(item))

    @staticmethod
    def paginate(function: Callable, result_key: str, last_key: str, start_key: str,
                 **arguments) -> Iterator[Any]:
        while True:
            result = function(**arguments)
            yield from result.get(result_key, [])
            last = result.get(last_key, None)
            if not last:
                break
            arguments[start_key] = last
