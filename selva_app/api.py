"""FastAPI application creation and configuration."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from apscheduler.schedulers.background import BackgroundScheduler

from .core.config import get_settings
from .core.logger import setup_logger
from .database.session import init_db
from .quiz.sessions import QuizSessionRegistry

logger = setup_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables, then run the quiz scheduler for the app's lifetime."""
    init_db()

    registry: QuizSessionRegistry = app.state.quiz_sessions
    sched = BackgroundScheduler()
    # Purge abandoned quiz sessions every few minutes
    sched.add_job(registry.purge_stale, 'interval', minutes=5, id='quiz_session_purge')
    sched.start()
    registry.scheduler = sched
    app.state.scheduler = sched
    logger.info("Scheduler started")

    yield

    registry.scheduler = None
    sched.shutdown(wait=False)
    app.state.scheduler = None


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        lifespan=lifespan
    )
    app.state.quiz_sessions = QuizSessionRegistry(
        auto_close_seconds=settings.QUIZ_AUTO_CLOSE_SECONDS,
        ttl_minutes=settings.QUIZ_SESSION_TTL_MINUTES,
    )
    app.state.scheduler = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    from .routes import auth, profile, quiz, recipes, meals, progress, admin
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(profile.router, prefix="/api/profile", tags=["profile"])
    app.include_router(quiz.router, prefix="/api/quiz", tags=["quiz"])
    app.include_router(recipes.router, prefix="/api/recipes", tags=["recipes"])
    app.include_router(meals.router, prefix="/api/meals", tags=["meals"])
    app.include_router(progress.router, prefix="/api/progress", tags=["progress"])
    app.include_router(admin.router, prefix="/api/admin", tags=["admin"])

    @app.get("/api/health")
    def health():
        return {"status": "ok", "message": f"{settings.APP_NAME} API running"}

    return app
