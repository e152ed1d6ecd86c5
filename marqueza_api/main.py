# marqueza_api/main.py
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import config
from .database import CATEGORIES, clear_all, seed_demo_data
from .routes.clients import router as clients_router
from .routes.login import router as login_router
from .routes.products import router as products_router
from .uploads import UploadError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    os.makedirs(config.UPLOAD_DIR, exist_ok=True)
    if not CATEGORIES:
        seed_demo_data()
        logger.info("Seeded demo catalog with %d categories", len(CATEGORIES))
    yield


app = FastAPI(title="marqueza-store (in-memory back office API)", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(products_router, prefix="/api", tags=["products"])
app.include_router(clients_router, prefix="/api/clients", tags=["clients"])
app.include_router(login_router, prefix="/api/login", tags=["login"])

app.mount("/uploads", StaticFiles(directory=config.UPLOAD_DIR, check_dir=False), name="uploads")


# ---------------------------
# Error bodies always carry "message"
# ---------------------------
@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    return JSONResponse(status_code=400, content={"success": False, "message": first.get("msg", "invalid request")})


@app.exception_handler(UploadError)
async def upload_error_handler(request: Request, exc: UploadError):
    logger.warning("Upload rejected on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": str(exc)})


@app.get("/health")
def health():
    return {"status": "ok", "service": "marqueza-api"}


# ---------------------------
# Utility: reset (for tests/demo)
# ---------------------------
@app.post("/api/reset")
async def reset_all(seed: bool = True):
    clear_all()
    if seed:
        seed_demo_data()
    return {"status": "reset"}


def run():
    import uvicorn

    config.configure_logging()
    uvicorn.run(app, host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
