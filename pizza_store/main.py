from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pizza_store.core.config import settings
from pizza_store.db import session as db_session
from pizza_store.routes import catalog as catalog_routes
from pizza_store.routes import health
from pizza_store.routes import orders as orders_routes

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL, logging.INFO))
# Dedicated logger so uvicorn.access formatting is left alone
_req_logger = logging.getLogger("app.request")
_req_logger.setLevel(getattr(logging, settings.LOG_LEVEL, logging.INFO))


@asynccontextmanager
async def lifespan(app: FastAPI):
    # create tables (and the catalog seed) if they don't exist
    db_session.create_db()
    yield


app = FastAPI(
    title="Pizza Store Orders API",
    version="1.0.0",
    description="Order placement and retrieval for the pizza store",
    redirect_slashes=False,
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Malformed bodies and non-integer ids are client errors (400), not 422.
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.middleware("http")
async def request_log_middleware(request: Request, call_next):
    counter = db_session.QueryCounter()
    token = db_session.request_db_query_count.set(counter)
    start = time.perf_counter()
    try:
        response = await call_next(request)
    finally:
        db_session.request_db_query_count.reset(token)
    duration_ms = int((time.perf_counter() - start) * 1000)

    if settings.REQUEST_LOG_VERBOSE:
        prefixes = [p.strip() for p in (settings.REQUEST_LOG_INCLUDE_PREFIXES or "").split(",") if p.strip()]
        path = request.url.path
        if any(path.startswith(pref) for pref in prefixes):
            _req_logger.info(
                f"{request.method} {path} -> {response.status_code} in {duration_ms}ms | db_queries={counter.value} global_db_queries={db_session.get_global_db_queries_total()}"
            )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(health.router)
app.include_router(orders_routes.router)
app.include_router(catalog_routes.router)


@app.get("/")
def root():
    return {"status": "Pizza store API running"}
