import logging
import threading
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from task_assignees.core.config import (
    CORS_ORIGINS,
    CORS_ORIGIN_REGEX,
    CUSTOM_API_PREFIX,
    CUSTOM_EXTENSIONS_ENABLED,
    DB_BOOTSTRAP_MODE,
    parse_cors_origins,
)
from task_assignees.database.base import Base
from task_assignees.database.session import engine, SessionLocal
from task_assignees.models import task_assignee  # noqa: F401
from task_assignees.routes import custom
from task_assignees.services.assignee_store import AssigneeStore

logger = logging.getLogger("uvicorn.error")


def run_db_bootstrap() -> None:
    steps = [
        ("create_all", lambda: Base.metadata.create_all(bind=engine)),
    ]
    for step_name, step_fn in steps:
        try:
            step_fn()
        except Exception:  # pragma: no cover - startup hardening
            logger.exception("Falha ao executar bootstrap do banco (etapa: %s)", step_name)


_bootstrap_lock = threading.Lock()
_bootstrap_started = False


def trigger_db_bootstrap(mode: Optional[str] = None) -> None:
    global _bootstrap_started
    with _bootstrap_lock:
        if _bootstrap_started:
            return
        _bootstrap_started = True

    mode = str(mode or DB_BOOTSTRAP_MODE).strip().lower()
    if mode == "off":
        logger.info("DB bootstrap desativado (DB_BOOTSTRAP_MODE=off).")
        return
    if mode == "background":
        logger.info("Executando DB bootstrap em background.")
        threading.Thread(target=run_db_bootstrap, daemon=True, name="db-bootstrap").start()
        return

    logger.info("Executando DB bootstrap em modo sincronizado.")
    run_db_bootstrap()


async def ensure_utf8_json_charset(request: Request, call_next):
    response = await call_next(request)
    content_type = str(response.headers.get("content-type", ""))
    if content_type.startswith("application/json") and "charset=" not in content_type.lower():
        response.headers["content-type"] = "application/json; charset=utf-8"
    return response


def create_app(
    store: Optional[AssigneeStore] = None,
    extensions_enabled: Optional[bool] = None,
) -> FastAPI:
    app = FastAPI(title="Responsáveis de Tarefas")
    app.state.assignee_store = store or AssigneeStore(SessionLocal)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_cors_origins(CORS_ORIGINS),
        allow_origin_regex=CORS_ORIGIN_REGEX,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"]
    )
    app.middleware("http")(ensure_utf8_json_charset)

    if extensions_enabled is None:
        extensions_enabled = CUSTOM_EXTENSIONS_ENABLED
    if extensions_enabled:
        app.include_router(custom.router, prefix=CUSTOM_API_PREFIX)
    else:
        logger.info("Extensões personalizadas desativadas (CUSTOM_EXTENSIONS_ENABLED=off).")

    @app.get("/")
    def root():
        return {"message": "API rodando corretamente!"}

    @app.get("/health")
    def healthcheck():
        return {"status": "ok"}

    @app.get("/health/db")
    def healthcheck_db():
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return {"status": "ok"}

    @app.on_event("startup")
    def startup_event():
        trigger_db_bootstrap()

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("task_assignees.main:app", host="0.0.0.0", port=8000)
