"""FastAPI entry point for the chat relay."""

from __future__ import annotations

import argparse
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, validator
import uvicorn

from .config import RelayConfig, load_config
from .exceptions import ConfigurationError, UpstreamError, ValidationError
from .service import ChatRelayService
from .utils import setup_logging

logger = logging.getLogger(__name__)


class ChatRequest(BaseModel):
    message: Optional[str] = Field(None, description="User message to relay to the model.")
    user_id: Optional[str] = Field(
        None, alias="userId", description="Opaque user identifier; defaults to 'anonymous'."
    )

    @validator("user_id")
    def _blank_as_missing(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


class ChatResponse(BaseModel):
    reply: str


def create_app(config: RelayConfig, *, service: Optional[ChatRelayService] = None) -> FastAPI:
    if config.log_dir:
        setup_logging(config.log_dir, logging.INFO)

    app = FastAPI(title="Medinova Chat Relay", version="0.1.0")
    app.state.config = config
    app.state.service = service or ChatRelayService(config)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Malformed bodies answer 400, same as a missing message; details stay in the log.
        logger.info("Rejected malformed chat request: %s", exc.errors())
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.post("/chat", response_model=ChatResponse)
    async def chat(request: ChatRequest):
        try:
            result = await run_in_threadpool(app.state.service.handle, request.message, request.user_id)
        except ValidationError as exc:
            return JSONResponse(status_code=400, content={"error": str(exc)})
        except UpstreamError as exc:
            logger.error("Upstream request failed (user_id=%s): %s", request.user_id, exc)
            return JSONResponse(status_code=500, content={"reply": config.error_reply})
        except Exception:
            logger.exception("Chat request failed (user_id=%s)", request.user_id)
            return JSONResponse(status_code=500, content={"reply": config.error_reply})

        return ChatResponse(reply=result.reply)

    return app


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the Medinova chat relay.")
    parser.add_argument("--host", help="Host interface to bind (env HOST).")
    parser.add_argument("--port", type=int, help="Port to bind (env PORT).")
    parser.add_argument("--log_dir", help="Directory for application logs (env LOG_DIR).")
    parser.add_argument("--model", help="Gemini model name (env GEMINI_MODEL).")
    parser.add_argument("--request_timeout", type=float, help="Timeout for upstream calls in seconds.")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    setup_logging(args.log_dir, logging.INFO)
    try:
        config = load_config()
    except ConfigurationError as exc:
        logger.error("Cannot start chat relay: %s", exc)
        raise SystemExit(1) from exc

    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port
    if args.log_dir:
        config.log_dir = args.log_dir
    if args.model:
        config.llm.model = args.model
    if args.request_timeout:
        config.llm.request_timeout = args.request_timeout

    app = create_app(config)
    logger.info("Starting chat relay on %s:%d using model %s", config.host, config.port, config.llm.model)
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
