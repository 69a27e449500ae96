import logging

from fastapi import FastAPI, Request
import uvicorn
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager

from core.config import settings
from core.errors import error_envelope
from core.logging_config import setup_logging
from db.database import dispose_engine
from routers.debug import router as debug_router
from routers.distance_matrix import router as distance_matrix_router
from routers.init import router as init_router
from routers.inventory import router as inventory_router
from routers.locations import router as locations_router
from routers.purchase import router as purchase_router
from routers.users import router as users_router

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("RV portal API starting")
    yield
    await dispose_engine()


app = FastAPI(
    title="RV Employee Purchase Portal API",
    description="Inventory browsing, PIN signup and purchase configuration for partner-company employees",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(exc.detail, getattr(exc, "details", None)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content=error_envelope("Invalid request parameters", details))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_envelope("Internal server error"))


# Reference data
app.include_router(init_router, prefix="/api/init", tags=["init"])
app.include_router(locations_router, prefix="/api/locations", tags=["locations"])
app.include_router(distance_matrix_router, prefix="/api/distance-matrix", tags=["locations"])

# Inventory browsing
app.include_router(inventory_router, prefix="/api/inventory", tags=["inventory"])

# Signup: /api/signup and /api/verify-pin
app.include_router(users_router, prefix="/api", tags=["auth"])

# Purchase wizard
app.include_router(purchase_router, prefix="/api/purchase", tags=["purchase"])

app.include_router(debug_router, prefix="/api/debug", tags=["debug"])

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
