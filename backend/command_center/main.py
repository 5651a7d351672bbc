import logging
from typing import Any, Dict

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .case_study_routes import router as case_study_router
from .config import Settings, get_settings
from .course_routes import router as course_router
from .db.session import get_engine
from .deadline_routes import router as deadline_router
from .growth_routes import router as growth_router
from .logging_config import configure_logging
from .mobile_routes import router as mobile_router


configure_logging()
logger = logging.getLogger(__name__)
app = FastAPI(title="MBA Command Center Backend", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

for router in (course_router, deadline_router, growth_router, case_study_router, mobile_router):
    app.include_router(router)


settings_snapshot = get_settings()
logger.info("Database configured: %s", bool(settings_snapshot.database_url))
logger.info("Advisor mode: %s (model=%s)", settings_snapshot.advisor_mode, settings_snapshot.agent_model)
logger.info(
    "Push reminders configured: %s",
    bool(settings_snapshot.firebase_project_id and settings_snapshot.firebase_service_account_key),
)


@app.get("/healthz")
def health(settings: Settings = Depends(get_settings)) -> Dict[str, str]:
    return {"status": "ok", "advisor_mode": settings.advisor_mode}


@app.get("/healthz/database")
def database_health() -> Dict[str, Any]:
    try:
        engine = get_engine()
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except (RuntimeError, SQLAlchemyError) as exc:
        logger.warning("Database health check failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return {
        "status": "ok",
        "dialect": engine.dialect.name,
        "pool": engine.pool.status(),
    }
