import logging
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from staydesk.config import settings

# ─── Logging setup (file + console) ───
_LOG_DIR = Path(settings.log_dir)
if not _LOG_DIR.is_absolute():
    _LOG_DIR = Path(__file__).resolve().parent.parent / _LOG_DIR
_LOG_DIR.mkdir(parents=True, exist_ok=True)

_log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(),
        RotatingFileHandler(
            _LOG_DIR / "staydesk.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ],
)

# Quiet noisy libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

from staydesk.routers import hotels, inventory, promotions, quotes, reservations, seasons
from staydesk.services.cache_service import cache_service
from staydesk.services.rates.errors import RateError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("StayDesk starting")
    yield
    # Shutdown
    await cache_service.close()
    from staydesk.database import engine
    await engine.dispose()
    logger.info("StayDesk stopped")


app = FastAPI(
    title="StayDesk",
    description="Hotel back-office: rates, promotions, inventory and reservations",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RateError)
async def rate_error_handler(request: Request, exc: RateError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})


app.include_router(hotels.router, prefix="/api", tags=["hotels"])
app.include_router(seasons.router, prefix="/api", tags=["seasons"])
app.include_router(promotions.router, prefix="/api/promotions", tags=["promotions"])
app.include_router(inventory.router, prefix="/api/inventory", tags=["inventory"])
app.include_router(quotes.router, prefix="/api/quotes", tags=["quotes"])
app.include_router(reservations.router, prefix="/api/reservations", tags=["reservations"])


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "service": "staydesk"}
