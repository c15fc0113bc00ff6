'''

'''
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from .database import engine as db_engine
from .database.repository import SQLAlchemyLedgerRepository
from .database.seed import ensure_bootstrap_admin
from .common.exceptions import LedgerError
from .common.logger import log
from .common.config import settings
from .api import auth, users, subjects, lessons, payments, accounts, reports

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handles application startup and shutdown events.
    """
    # --- On App Startup ---
    log.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}...")
    db_engine.create_db_engine_and_session_factory()
    if settings.CREATE_TABLES_ON_STARTUP:
        await db_engine.create_tables()

    async with db_engine.AsyncSessionLocal() as session:
        await ensure_bootstrap_admin(SQLAlchemyLedgerRepository(session))
        await session.commit()

    yield # --- Application is now running ---

    # --- On App Shutdown ---
    log.info("Application lifespan shutdown...")
    await db_engine.dispose_db_engine()


# ---- CREATING THE APP ----
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan
)

# --- Add CORS Middleware ---
origins = [
    # URL of local frontend
    "http://localhost",
    "http://localhost:3000",
    "http://localhost:5173",
]

# Extend with environment-specific origins
origins.extend(settings.BACKEND_CORS_ORIGINS)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],)
# --- End of CORS Middleware ---

@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    """Maps domain errors (NotFound, Conflict, InvalidInput, UnauthorizedRole) to HTTP."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

@app.get("/")
async def health_check():
    return {"status": "ok", "message": f"{settings.APP_NAME} is running"}

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(subjects.router)
app.include_router(lessons.router)
app.include_router(payments.router)
app.include_router(accounts.router)
app.include_router(reports.router)
