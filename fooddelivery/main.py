# fooddelivery/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .db import init_db
from .errors import AppError, Unexpected
from .routers.auth import router as auth_router
from .routers.feedback import router as feedback_router
from .routers.orders import router as orders_router
from .routers.restaurants import router as restaurants_router

# -------------------
# Logging
# -------------------
settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] [food-delivery] %(name)s: %(message)s",
)
logger = logging.getLogger("food-delivery")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Database ready")
    yield


app = FastAPI(title="Food Delivery API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_origin_regex=settings.cors_origin_regex or None,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(auth_router)
app.include_router(restaurants_router)
app.include_router(orders_router)
app.include_router(feedback_router)


# -------------------
# Errors -> {"message": ...}
# -------------------
def _validation_message(errors: List[Dict[str, Any]]) -> str:
    if not errors:
        return "Invalid request"
    parts = []
    for err in errors:
        loc = [str(x) for x in err.get("loc", ()) if x != "body"]
        msg = err.get("msg", "invalid value")
        parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return "; ".join(parts)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"message": _validation_message(exc.errors())})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": Unexpected.default_message})


# -------------------
# Health
# -------------------
@app.get("/")
def root():
    return {"message": "Food Delivery API", "version": app.version}


@app.get("/health")
def health():
    return {"ok": True}


def run() -> None:
    import uvicorn

    uvicorn.run("fooddelivery.main:app", host="0.0.0.0", port=get_settings().port)


if __name__ == "__main__":
    run()
