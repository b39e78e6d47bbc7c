import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes.announcements import events_router, news_router
from api.routes.auth import router as auth_router
from api.routes.papers import router as papers_router
from api.routes.users import router as users_router
from unida.config import Config
from unida.database.db.models import Base
from unida.database.db.session import engine
from unida.exceptions import AppError
from unida.log import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    # Create any missing tables on startup
    Base.metadata.create_all(bind=engine)
    logger.info(f"🚀 UNIDA API started, database: {engine.url.render_as_string(hide_password=True)}")
    yield
    engine.dispose()
    logger.info("👋 UNIDA API stopped")


app = FastAPI(title="UNIDA Papers API", lifespan=lifespan)

# "*" cannot be combined with credentials
cors_origins = Config.allowed_origins or ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials="*" not in cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(papers_router)
app.include_router(users_router)
app.include_router(news_router)
app.include_router(events_router)


# ============== Error handlers ==============

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path}: {exc.message}")
    body = {"error": exc.message}
    errors = getattr(exc, "errors", None)
    if errors:
        body["errors"] = errors
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = {}
    for err in exc.errors():
        # drop the "body"/"query" prefix from the location
        loc = [str(part) for part in err.get("loc", ())[1:]] or ["request"]
        errors[".".join(loc)] = err.get("msg", "invalid")
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "errors": errors},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/api/health")
async def health_check():
    return {"ok": True}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=Config.host, port=Config.port)
