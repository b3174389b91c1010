# todoserver/main.py

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from todoserver.api import auth, todos
from todoserver.config import CORS_ORIGINS, LOG_LEVEL
from todoserver.core.errors import TodoAppError
from todoserver.database import init_db


# ───────────────────────── logging ──────────────────────────────────────────
logging.basicConfig(
    format="%(asctime)s — %(name)s — %(levelname)s — %(message)s",
    level=LOG_LEVEL,
)
logger = logging.getLogger(__name__)


# ───────────────────────── error handlers ───────────────────────────────────
async def handle_app_error(request: Request, exc: TodoAppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request body"
    if errors:
        loc = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        message = f"Invalid request: {loc} {errors[0].get('msg', '')}".strip()
    return JSONResponse(status_code=400, content={"error": message})


# ───────────────────────── FastAPI app ──────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Database schema ready")
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="Todo App Backend", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials="*" not in CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TodoAppError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)

    app.include_router(auth.router)
    app.include_router(todos.router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()


# ───────────────────────── dev entrypoint ───────────────────────────────────
if __name__ == "__main__":
    import uvicorn

    host, port = "0.0.0.0", 8000
    logger.info("Starting dev server on http://%s:%d", host, port)
    uvicorn.run("todoserver.main:app", host=host, port=port, reload=True)
