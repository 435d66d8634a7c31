import math

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, field_validator

from catalog.models import Product
from catalog.service import Catalog


# requests

class ProductPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: StrictInt
    name: StrictStr = Field(alias='Name')
    price: StrictInt | StrictFloat = Field(alias='Price')

    @field_validator('price')
    @classmethod
    def check_finite(cls, value: int | float) -> int | float:
        if not math.isfinite(value):
            raise ValueError('price should be a finite number')
        return value

    def to_product(self) -> Product:
        return Product(id=self.id, name=self.name, price=self.price)


router = APIRouter()


def get_catalog(request: Request) -> Catalog:
    """ The catalog built at startup, stored on app.state """
    return request.app.state.catalog


@router.get('/products', status_code=status.HTTP_200_OK)
def list_products(catalog: Catalog = Depends(get_catalog)) -> list[Product]:
    return catalog.list_all()


@router.post('/product', status_code=status.HTTP_201_CREATED)
def create_product(request: ProductPayload, catalog: Catalog = Depends(get_catalog)) -> Product:
    return catalog.insert(request.to_product())
