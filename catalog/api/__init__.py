from fastapi import APIRouter, FastAPI

from dynamo_toolkit.db import Store
from catalog.service import Catalog

# import resources
from . import errors, products


def create_app(store: Store) -> FastAPI:
    """ Build the API around one store, shared read-only by every request """

    # setup FastAPI
    app = FastAPI(title='Products Catalog API')
    app.state.catalog = Catalog(store)
    errors.setup_error_handlers(app)
    router = APIRouter()

    # basic endpoint for verifying API status
    @app.get('/healthcheck')
    async def healthcheck():
        return 'ok'

    # end setup FastAPI

    ##########################
    # Include Resources here #
    ##########################
    router.include_router(products.router, tags=['products'])

    app.include_router(router)
    return app
