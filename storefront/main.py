import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from prometheus_fastapi_instrumentator import Instrumentator

from storefront.version import VERSION
from storefront.api import auth, cart, categories, orders, products
from storefront.core.config import settings
from storefront.core.errors import StorageFailure, StoreError
from storefront.core.logging import configure_logging

configure_logging(settings.LOG_LEVEL)
log = logging.getLogger(__name__)

PREFIX = settings.API_PREFIX.rstrip('/')

# Create instrumentator first
instrumentator = Instrumentator()

app = FastAPI(title='Storefront API', version=VERSION)

# Instrument the app BEFORE adding routes or middleware
instrumentator.instrument(app).expose(
    app,
    include_in_schema=False,
    endpoint=f"{PREFIX}/metrics",
    should_gzip=True,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={'error': message})

@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    return error_response(exc.status_code, exc.message)

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return error_response(400, 'Invalid request')
    first = errors[0]
    field = '.'.join(str(p) for p in first.get('loc', ()) if p not in ('body', 'query', 'path', 'form'))
    return error_response(400, f"{field}: {first.get('msg')}" if field else first.get('msg', 'Invalid request'))

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={'error': exc.detail}, headers=exc.headers)

@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    log.error("storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    failure = StorageFailure()
    return error_response(failure.status_code, failure.message)

@app.get(f'{PREFIX}/health')
def api_health(): return {'status': 'OK', 'message': 'Server is running'}

@app.get('/health')
def health(): return {'status': 'ok'}

@app.get('/v1/_info')
def info(): return {'service': 'storefront', 'version': VERSION}

@app.on_event("startup")
async def startup_event():
    for route in app.routes:
        if hasattr(route, "methods") and hasattr(route, "path"):
            log.debug("%s %s", sorted(route.methods), route.path)

app.include_router(auth.router,       prefix=f'{PREFIX}/auth',       tags=['auth'])
app.include_router(categories.router, prefix=f'{PREFIX}/categories', tags=['categories'])
app.include_router(products.router,   prefix=f'{PREFIX}/products',   tags=['products'])
app.include_router(cart.router,       prefix=f'{PREFIX}/cart',       tags=['cart'])
app.include_router(orders.router,     prefix=f'{PREFIX}/orders',     tags=['orders'])
