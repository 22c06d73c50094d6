import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from roampedia.config import settings

# ─── Logging setup (file + console) ───
_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_LOG_DIR.mkdir(exist_ok=True)

_log_level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)

logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(),
        RotatingFileHandler(
            _LOG_DIR / "roampedia.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ],
)

# Quiet noisy libraries
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

from roampedia.routers import (  # noqa: E402
    admin,
    ai_recommendations,
    attractions,
    auth,
    chatbot,
    countries,
    expenses,
    experiences,
    itineraries,
    lists,
    recommendations,
    reports,
    tasks,
    travel_notes,
    user_stats,
)
from roampedia.services.chatbot_service import chatbot_service  # noqa: E402

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Auto-seed admin account and sample countries if the DB is empty (dev convenience)
    try:
        from roampedia.seed import seed
        await seed()
    except Exception as e:
        logger.warning(f"Auto-seed skipped: {e}")

    yield

    # Shutdown
    await chatbot_service.client.fetcher.close()
    logger.info("Upstream HTTP client closed")


app = FastAPI(
    title="Roampedia",
    description="Travel discovery, planning and recommendation API",
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

app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(recommendations.router, prefix="/api/recommendations", tags=["recommendations"])
app.include_router(ai_recommendations.router, prefix="/api/ai-recommendations", tags=["ai-recommendations"])
app.include_router(chatbot.router, prefix="/api/chatbot", tags=["chatbot"])
app.include_router(lists.router, prefix="/api", tags=["lists"])
app.include_router(travel_notes.router, prefix="/api/travelnotes", tags=["travel-notes"])
app.include_router(experiences.router, prefix="/api/experiences", tags=["experiences"])
app.include_router(expenses.router, prefix="/api/expenses", tags=["expenses"])
app.include_router(itineraries.router, prefix="/api/itineraries", tags=["itineraries"])
app.include_router(tasks.router, prefix="/api/tasks", tags=["tasks"])
app.include_router(countries.router, prefix="/api/countries", tags=["countries"])
app.include_router(attractions.router, prefix="/api/attractions", tags=["attractions"])
app.include_router(user_stats.router, prefix="/api/user", tags=["user-stats"])
app.include_router(admin.router, prefix="/api/admin", tags=["admin"])
app.include_router(reports.router, prefix="/api/reports", tags=["reports"])


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "service": "roampedia"}
