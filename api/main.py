from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from docanalytics import config
from docanalytics.auth.auth_router import router as auth_router
from docanalytics.auth.db import Base, engine
from docanalytics.classify.classifier import Classifier
from docanalytics.docs import models as _doc_models  # noqa: F401  (register tables)
from docanalytics.docs.router import router as docs_router
from docanalytics.ingest.extractors import TextExtractor
from docanalytics.log import configure_logging, log_step
from docanalytics.storage.blob import BlobStorage, make_storage

logger = logging.getLogger("docanalytics.api")


# =========================
# FastAPI Application
# =========================
def create_app(storage: BlobStorage | None = None) -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Document Analytics API",
        version="0.1.0",
        docs_url="/api-docs",
        redoc_url=None,
    )

    # If you later move to a managed database, consider relocating to a migration step
    Base.metadata.create_all(bind=engine)

    # Collaborators shared read-only by every request; handed out via Depends
    app.state.storage = storage if storage is not None else make_storage()
    app.state.extractor = TextExtractor()
    app.state.classifier = Classifier()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def _log_requests(request: Request, call_next):
        started = time.time()
        resp = await call_next(request)
        log_step(
            logger,
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=resp.status_code,
            process_time=round(time.time() - started, 4),
        )
        return resp

    app.include_router(auth_router, prefix="")
    app.include_router(docs_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    log_step(logger, "app_created", storage_backend=type(app.state.storage).__name__)
    return app


app = create_app()
