from pydantic import BaseModel, ConfigDict, Field

from dynamo_toolkit.db import table


TABLE_NAME = 'Products'
ID_ATTRIBUTE = 'id'


# Attribute names match the deployed table: id, Name, Price.
@table(TABLE_NAME, partition_key=ID_ATTRIBUTE)
class Product(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str = Field(alias='Name')
    price: float = Field(alias='Price', allow_inf_nan=False)

    def __str__(self) -> str:
        return f'<(Id: {self.id}) {{{self.name}}} @ {self.price}>'
