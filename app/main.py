# app/main.py — router mounting, CORS and error mapping

from __future__ import annotations

import importlib
import logging

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.settings import settings
from app.errors import AuthenticationError, CinemaError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("startup")

app = FastAPI(
    title="Cinema Reviews API",
    version="1.0.0",
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url=None,
)

# ───────────────── CORS ─────────────────
# Bearer tokens (Authorization header), not cookies, so no credentials.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ───────────────── Error mapping ─────────────────
@app.exception_handler(CinemaError)
async def cinema_error_handler(request: Request, exc: CinemaError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # malformed input is a plain client error here, not 422
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


# Single API namespace prefix
api = APIRouter(prefix="/api")


def _include(router_import: str, attr: str = "router") -> None:
    """Import a router module and include it under /api."""
    mod = importlib.import_module(router_import)
    router = getattr(mod, attr)
    api.include_router(router)
    log.info("Mounted router: %s (prefix=%s)", router_import, getattr(router, "prefix", ""))


# ───────────────── Mount routers ─────────────────
_include("app.routes.health")
_include("app.routes.auth")
_include("app.routes.reviews")
_include("app.routes.catalog")

# Attach /api router once
app.include_router(api)
