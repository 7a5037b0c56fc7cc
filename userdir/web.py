"""HTTP transport for the directory handlers."""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from userdir.directory.handlers import DirectoryHandlers
from userdir.models.requests import (
    CreateUserRequest,
    DeleteUserRequest,
    DirectoryResponse,
    UpdateHashRequest,
)

logger = logging.getLogger(__name__)


def _to_json(response: DirectoryResponse) -> JSONResponse:
    return JSONResponse(response.to_body(), status_code=response.code)


def create_app(handlers: DirectoryHandlers) -> FastAPI:
    app = FastAPI(title="userdir")

    @app.get("/health")
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    @app.post("/user/create")
    async def create_user(body: CreateUserRequest) -> JSONResponse:
        return _to_json(await handlers.create_user(body))

    @app.get("/user/{uuid}")
    async def get_user(uuid: str) -> JSONResponse:
        return _to_json(await handlers.get_user(uuid))

    @app.put("/user/update-hash")
    async def update_hash(body: UpdateHashRequest) -> JSONResponse:
        return _to_json(await handlers.update_hash(body))

    @app.delete("/user/delete")
    async def delete_user(body: DeleteUserRequest) -> JSONResponse:
        return _to_json(await handlers.delete_user(body))

    return app


async def serve(app: FastAPI, host: str, port: int, log_level: str = "info") -> None:
    config = uvicorn.Config(app, host=host, port=port, log_level=log_level, log_config=None)
    server = uvicorn.Server(config)
    logger.info("Directory listening on %s:%d", host, port)
    await server.serve()


__all__ = ["create_app", "serve"]
