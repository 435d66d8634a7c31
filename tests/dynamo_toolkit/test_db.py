from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from unittest import TestCase

from pydantic import BaseModel
from parameterized import parameterized

from dynamo_toolkit.db import DynamoStore, StoreError, from_item, meta, table, table_schema, to_item
from catalog.models import Product
from tests.test_utils import StoreTestCase


@table('Tags', partition_key='label')
class Tag(BaseModel):
    label: str
    weight: float = 1.0


class Undescribed(BaseModel):
    id: int


@table('Broken', partition_key='tags')
class Broken(BaseModel):
    tags: list[str]


class TestTableDescription(TestCase):

    def test_meta(self):
        descriptor = meta(Product)
        assert descriptor.name == 'Products'
        assert descriptor.partition_key == 'id'
        assert meta(Product(id=1, Name='Widget', Price=1.0)) is descriptor

    @parameterized.expand([
        ("undescribed model", Undescribed),
        ("not a model", dict),
    ])
    def test_meta_error(self, _, model):
        with self.assertRaises(TypeError):
            meta(model)

    def test_products_schema(self):
        assert table_schema(Product) == {
            'TableName': 'Products',
            'KeySchema': [{'AttributeName': 'id', 'KeyType': 'HASH'}],
            'AttributeDefinitions': [{'AttributeName': 'id', 'AttributeType': 'N'}],
            'ProvisionedThroughput': {'ReadCapacityUnits': 10, 'WriteCapacityUnits': 10},
        }

    def test_string_key_schema(self):
        schema = table_schema(Tag, read_capacity=1, write_capacity=2)
        assert schema['AttributeDefinitions'] == [{'AttributeName': 'label', 'AttributeType': 'S'}]
        assert schema['ProvisionedThroughput'] == {'ReadCapacityUnits': 1, 'WriteCapacityUnits': 2}

    def test_unsupported_key_type(self):
        with self.assertRaises(TypeError):
            table_schema(Broken)


class TestItemConversion(TestCase):

    def test_to_item(self):
        item = to_item(Product(id=1, name='Widget', price=9.99))
        assert item == {'id': 1, 'Name': 'Widget', 'Price': Decimal('9.99')}

    def test_from_item(self):
        product = from_item(Product, {'id': Decimal('2'), 'Name': 'Gadget', 'Price': Decimal('19.99')})
        assert product == Product(id=2, name='Gadget', price=19.99)
        assert isinstance(product.id, int)
        assert isinstance(product.price, float)


class TestPaginate(TestCase):

    def test_follows_last_key(self):
        pages = {
            None: {'Items': [1, 2], 'LastEvaluatedKey': {'id': 2}},
            2: {'Items': [3], 'LastEvaluatedKey': {'id': 3}},
            3: {'Items': []},
        }
        calls = []

        def scan(**arguments):
            calls.append(arguments)
            start = arguments.get('ExclusiveStartKey')
            return pages[start and start['id']]

        result = list(DynamoStore.paginate(scan, 'Items', 'LastEvaluatedKey', 'ExclusiveStartKey'))
        assert result == [1, 2, 3]
        assert calls == [{}, {'ExclusiveStartKey': {'id': 2}}, {'ExclusiveStartKey': {'id': 3}}]


class TestDynamoStore(StoreTestCase):
    models = {
        Product: [Product(id=1, name='Widget', price=9.99)],
    }

    def test_list_table_names(self):
        assert self.store.list_table_names() == ['Products']

    def test_create_table(self):
        self.store.create_table(table_schema(Tag))
        assert sorted(self.store.list_table_names()) == ['Products', 'Tags']

        description = self.store.client.describe_table(TableName='Tags')['Table']
        assert description['TableStatus'] == 'ACTIVE'
        assert description['KeySchema'] == [{'AttributeName': 'label', 'KeyType': 'HASH'}]

    def test_create_existing_table(self):
        with self.assertRaises(StoreError) as context:
            self.store.create_table(table_schema(Product))
        assert context.exception.operation == 'CreateTable'
        assert context.exception.table_name == 'Products'

    def test_scan_all(self):
        assert list(self.store.scan_all('Products')) == [
            {'id': Decimal('1'), 'Name': 'Widget', 'Price': Decimal('9.99')},
        ]

    def test_put_item_overwrites(self):
        self.store.put_item('Products', to_item(Product(id=1, name='Widget v2', price=12.5)))
        records = list(self.store.scan_all('Products'))
        assert records == [{'id': Decimal('1'), 'Name': 'Widget v2', 'Price': Decimal('12.5')}]

    def test_scan_missing_table(self):
        with self.assertRaises(StoreError) as context:
            list(self.store.scan_all('Missing'))
        assert context.exception.operation == 'Scan'
        assert "on table 'Missing' failed" in str(context.exception)

    def test_put_missing_table(self):
        with self.assertRaises(StoreError):
            self.store.put_item('Missing', {'id': 1})

    def test_wire_format(self):
        raw = self.store.client.get_item(TableName='Products', Key={'id': {'N': '1'}})['Item']
        assert raw == {'id': {'N': '1'}, 'Name': {'S': 'Widget'}, 'Price': {'N': '9.99'}}

    def test_concurrent_puts(self):
        products = [Product(id=index, name=f'item-{index}', price=index / 4) for index in range(2, 42)]
        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda product: self.store.put_item('Products', to_item(product)), products))

        ids = sorted(int(record['id']) for record in self.store.scan_all('Products'))
        assert ids == list(range(1, 42))

    def test_put_nan(self):
        with self.assertRaises(TypeError):
            self.store.put_item('Products', {'id': 5, 'Name': 'Void', 'Price': Decimal('NaN')})
