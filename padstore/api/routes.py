from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse

from padstore import __version__
from padstore.core.errors import NotFoundError, StoreError
from padstore.core.models import PersistedDocument, Stats
from padstore.services.context import ServerConfig

logger = logging.getLogger(__name__)

router = APIRouter()


def server_config(request: Request) -> ServerConfig:
    cfg = getattr(request.app.state, "server_config", None)
    if cfg is None:
        raise HTTPException(status_code=503, detail="server is still starting")
    return cfg


def _load(cfg: ServerConfig, document_id: str) -> PersistedDocument:
    if cfg.database is None:
        raise HTTPException(status_code=404, detail="persistence is disabled")
    try:
        return cfg.database.load(document_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail=f"document not found: {document_id}")
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/")
@router.get("/healthz")
def healthz():
    return {"status": "ok"}


@router.get("/version")
def version():
    return {"service": "padstore", "version": __version__}


@router.get("/api/stats", response_model=Stats)
def stats(cfg: ServerConfig = Depends(server_config)):
    database_size = 0
    if cfg.database is not None:
        try:
            database_size = cfg.database.count()
        except StoreError as e:
            raise HTTPException(status_code=500, detail=str(e))
    return Stats(start_time=cfg.start_time, database_size=database_size, persistence=cfg.persistence)


@router.get("/api/text/{document_id}", response_class=PlainTextResponse)
def get_text(document_id: str, cfg: ServerConfig = Depends(server_config)):
    return _load(cfg, document_id).text


@router.get("/api/document/{document_id}", response_model=PersistedDocument)
def get_document(document_id: str, cfg: ServerConfig = Depends(server_config)):
    return _load(cfg, document_id)


@router.put("/api/text/{document_id}")
def put_text(document_id: str, body: PersistedDocument, cfg: ServerConfig = Depends(server_config)):
    if cfg.database is None:
        raise HTTPException(status_code=503, detail="persistence is disabled")
    try:
        cfg.database.store_document(document_id, body)
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"status": "ok", "id": document_id}
