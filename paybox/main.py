"""
PayBox Backend — FastAPI application entry‑point.
"""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from paybox.config import settings
from paybox.database import Base, engine
from paybox.errors import EmptyBatchError, PayBoxError

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s  %(name)-30s  %(levelname)-5s  %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: ensure data dir + tables exist
    os.makedirs(settings.DATA_DIR, exist_ok=True)
    # Import models so Base.metadata knows about them
    import paybox.models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready (%s)", settings.DATABASE_URL)
    yield
    logger.info("Shutting down")


app = FastAPI(
    title="PayBox",
    description="Expense capture → OCR normalization → Odoo spreadsheet export",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Registros-Exportados", "X-Lote-Id"],
)


@app.exception_handler(PayBoxError)
async def paybox_error_handler(request: Request, exc: PayBoxError):
    if isinstance(exc, EmptyBatchError):
        logger.info("%s %s: %s", request.method, request.url.path, exc.message)
    elif exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("%s %s crashed", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "internal_error", "message": "Unexpected server error"},
    )


@app.get("/")
async def root():
    return {"service": "PayBox", "version": "0.1.0", "status": "running"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


# ── Register API routers ─────────────────────────────────────────────────
from paybox.routers.announcements import router as announcements_router  # noqa: E402
from paybox.routers.attachments import router as attachments_router  # noqa: E402
from paybox.routers.categories import router as categories_router  # noqa: E402
from paybox.routers.export import router as export_router  # noqa: E402
from paybox.routers.gps import router as gps_router  # noqa: E402
from paybox.routers.ocr import router as ocr_router  # noqa: E402
from paybox.routers.payments import router as payments_router  # noqa: E402
from paybox.routers.trailers import router as trailers_router  # noqa: E402
from paybox.routers.users import router as users_router  # noqa: E402

app.include_router(categories_router, prefix="/api", tags=["Categories"])
app.include_router(payments_router, prefix="/api", tags=["Payments"])
app.include_router(attachments_router, prefix="/api", tags=["Attachments"])
app.include_router(ocr_router, prefix="/api", tags=["OCR"])
app.include_router(export_router, prefix="/api", tags=["Export"])
app.include_router(gps_router, prefix="/api", tags=["GPS"])
app.include_router(users_router, prefix="/api", tags=["Users"])
app.include_router(trailers_router, prefix="/api", tags=["Trailers"])
app.include_router(announcements_router, prefix="/api", tags=["System Updates"])
