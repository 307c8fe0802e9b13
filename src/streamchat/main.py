# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the main unit so this responsibility stays isolated, testable, and easy to evolve.

Main application entry point for the StreamChat server.
Includes configuration setup, error handling, and router registration.
"""

from __future__ import annotations

import argparse
import os
from typing import Any, Dict, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from streamchat.api.v1.chat import router as chat_router
from streamchat.api.v1.debug import router as debug_router
from streamchat.api.v1.http_responses import error_json
from streamchat.api.v1.ui import page_router, router as ui_router
from streamchat.core.config import STATIC_DIR, load_app_config
from streamchat.services.chat.chat_service import ChatService
from streamchat.services.exceptions import ServiceError


def create_app(config: Optional[Dict[str, Any]] = None) -> FastAPI:
    """Create the FastAPI app.

    Each app owns its own session registry; nothing is shared at module level.
    """
    if config is None:
        config = load_app_config()

    app = FastAPI(title="StreamChat")
    app.state.config = config
    app.state.chat_service = ChatService.from_config(config)

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    api_v1_router = APIRouter(prefix="/api/v1")
    api_v1_router.include_router(chat_router)
    api_v1_router.include_router(ui_router)
    api_v1_router.include_router(debug_router)
    api_v1_router.add_api_route(
        "/health", endpoint=lambda: {"status": "ok"}, methods=["GET"]
    )
    app.include_router(api_v1_router)
    app.include_router(page_router)

    # --------------- global exception handlers ---------------
    @app.exception_handler(ServiceError)
    async def _service_error_handler(
        _request: Request, exc: ServiceError
    ) -> JSONResponse:
        return error_json(exc.detail, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # The default body echoes the submitted input, which may hold an API key.
        fields = sorted(
            {".".join(str(p) for p in err.get("loc", ())[1:]) for err in exc.errors()}
        )
        return error_json(
            "Invalid request body", status_code=422, fields=[f for f in fields if f]
        )

    return app


app = create_app()


def build_arg_parser() -> argparse.ArgumentParser:
    """Build Arg Parser."""
    parser = argparse.ArgumentParser(
        prog="streamchat",
        description="Run the StreamChat server",
    )
    parser.add_argument("--host", default=None, help="Host to bind (default: config)")
    parser.add_argument(
        "--port", type=int, default=None, help="Port to bind (default: 7860)"
    )
    parser.add_argument("--config", default=None, help="Path to an app.json file")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload (development only)",
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["critical", "error", "warning", "info", "debug", "trace"],
        help="Log level for the server (default: info)",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entrypoint to run the server via a normal Python invocation.

    Examples:
      python -m streamchat.main --help
      python -m streamchat.main --host 0.0.0.0 --port 7860
    """
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.config:
        os.environ["STREAMCHAT_CONFIG"] = args.config

    config = load_app_config()
    host = args.host or config["server"]["host"]
    port = args.port or config["server"]["port"]

    # Import uvicorn lazily so that importing this module doesn't require it for tests/tools
    import uvicorn  # type: ignore

    if args.reload:
        app_target: Any = "streamchat.main:create_app"
        factory = True
    else:
        app_target = create_app(config)
        factory = False

    uvicorn.run(
        app_target,
        host=host,
        port=port,
        reload=bool(args.reload),
        log_level=args.log_level,
        factory=factory,
    )


if __name__ == "__main__":
    main()
