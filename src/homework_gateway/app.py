# src/homework_gateway/app.py
import logging
from typing import Callable

from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from homework_gateway import __version__
from homework_gateway.core.logging import setup_logging
from homework_gateway.core.config import get_settings
from homework_gateway.core.envelope import read_envelope
from homework_gateway.core.validate import validate_chat, validate_image
from homework_gateway.core.detect import classify
from homework_gateway.core.trace import RequestContext, log_event
from homework_gateway.adapters.upstream import UpstreamClient
from homework_gateway.errors import ClientError, GatewayError, to_error_body
from homework_gateway.models import ChatReply, ImageReply

setup_logging()

app = FastAPI(title="Homework Gateway", version=__version__)

# Browser callers send these on every request; preflight must answer with no body,
# so the headers are set by hand instead of via CORSMiddleware.
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def _build_upstream() -> UpstreamClient:
    return UpstreamClient(get_settings())


def get_upstream() -> Callable[[], UpstreamClient]:
    """
    Returns a client factory; routes call it inside their try block so
    settings failures map to INTERNAL_ERROR. Overridden in tests.
    """
    return _build_upstream


def _respond(ctx: RequestContext, status: int, body: BaseModel) -> JSONResponse:
    return JSONResponse(
        body.model_dump(exclude_none=True),
        status_code=status,
        headers={**CORS_HEADERS, "X-Request-ID": ctx.request_id},
    )


def _error(ctx: RequestContext, exc: Exception) -> JSONResponse:
    status, body = to_error_body(exc)
    if isinstance(exc, ClientError):
        log_event(ctx, logging.WARNING, "request.rejected",
                  status=status, code=body.code, reason=exc.detail, elapsed_ms=ctx.elapsed_ms())
    elif isinstance(exc, GatewayError):
        log_event(ctx, logging.ERROR, "request.failed",
                  status=status, code=body.code, reason=repr(exc.detail), elapsed_ms=ctx.elapsed_ms())
    else:
        log_event(ctx, logging.ERROR, "request.failed",
                  status=status, code=body.code, error=repr(exc), elapsed_ms=ctx.elapsed_ms(), exc_info=True)
    return _respond(ctx, status, body)


# 1) Health check (open)
@app.get("/healthz")
def health():
    return {"status": "ok"}


# 2) CORS preflight
@app.options("/v1/chat")
@app.options("/v1/generate-image")
async def preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


# 3) Chat: parse -> validate -> classify -> invoke -> map
@app.post("/v1/chat")
async def chat(request: Request, make_upstream: Callable[[], UpstreamClient] = Depends(get_upstream)):
    ctx = RequestContext.new()
    try:
        body = await read_envelope(request, ctx)
        req = validate_chat(body)
        log_event(ctx, logging.INFO, "request.validated",
                  messages=len(req.messages), chars=sum(len(m.content) for m in req.messages))

        profile = classify(req.messages)
        log_event(ctx, logging.INFO, "agent.selected", agent=repr(profile.name))

        reply = await make_upstream().chat(ctx, profile, req)
    except Exception as exc:
        return _error(ctx, exc)

    log_event(ctx, logging.INFO, "request.completed",
              status=200, agent=repr(profile.name), reply_length=len(reply), elapsed_ms=ctx.elapsed_ms())
    return _respond(ctx, 200, ChatReply(agent=profile.name, reply=reply))


# 4) Image generation: same envelope rules, single prompt
@app.post("/v1/generate-image")
async def generate_image(request: Request, make_upstream: Callable[[], UpstreamClient] = Depends(get_upstream)):
    ctx = RequestContext.new()
    try:
        body = await read_envelope(request, ctx)
        req = validate_image(body)
        log_event(ctx, logging.INFO, "request.validated", prompt_length=len(req.prompt), quality=req.quality)

        image_url = await make_upstream().generate_image(ctx, req)
    except Exception as exc:
        return _error(ctx, exc)

    log_event(ctx, logging.INFO, "request.completed", status=200, elapsed_ms=ctx.elapsed_ms())
    return _respond(ctx, 200, ImageReply(imageUrl=image_url))
