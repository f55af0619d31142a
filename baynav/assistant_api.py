"""
Smart Assistant HTTP API

POST /api/smart-assistant    {message, conversationHistory?} -> program cards
OPTIONS /api/smart-assistant CORS preflight

Checks run in a fixed order: rate limit, search configuration, payload.
Every response is JSON and carries a permissive CORS origin.
"""

import asyncio
import logging
import uuid
from typing import Any, Awaitable, Dict, List, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ValidationError

from baynav.assistant import AssistantAnswer, run_smart_assistant
from baynav.privacy import client_ip_from_headers, hash_client_ip, simplify_user_agent

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Smart Assistant"])

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Max-Age": "86400",
}

RATE_LIMIT_RETRY_AFTER_SEC = 60

ERROR_BAD_MESSAGE = "Please provide a message."
ERROR_NOT_CONFIGURED = "Smart assistant search is not configured. Please try again later."
ERROR_RATE_LIMITED = "Too many requests. Please wait a minute and try again."
ERROR_INTERNAL = "Something went wrong. Please try again."

# nginx convention for "client closed request"
CLIENT_CLOSED_REQUEST = 499

DISCONNECT_POLL_SEC = 0.1


class HistoryTurn(BaseModel):
    role: str
    content: str


class ClientDisconnected(Exception):
    pass


def json_response(body: Dict[str, Any], status_code: int = 200, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(content=body, status_code=status_code, headers={**CORS_HEADERS, **(headers or {})})


def error_response(message: str, status_code: int, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return json_response({"error": message}, status_code=status_code, headers=headers)


def parse_history(raw: Any) -> List[Dict[str, str]]:
    """Keep well-formed {role, content} turns; anything else is dropped."""
    if not isinstance(raw, list):
        return []
    turns = []
    for item in raw:
        try:
            turn = HistoryTurn.model_validate(item)
        except ValidationError:
            continue
        turns.append(turn.model_dump())
    return turns


async def run_until_disconnect(request: Request, work: Awaitable[AssistantAnswer]) -> AssistantAnswer:
    """Await the pipeline, cancelling it if the client goes away first."""
    task = asyncio.ensure_future(work)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_SEC)
            if done:
                return task.result()
            if await request.is_disconnected():
                raise ClientDisconnected()
    finally:
        if not task.done():
            task.cancel()


@router.options("/api/smart-assistant")
async def smart_assistant_preflight():
    return Response(status_code=204, headers=PREFLIGHT_HEADERS)


@router.post("/api/smart-assistant")
async def smart_assistant(request: Request):
    invocation_id = uuid.uuid4().hex[:12]
    state = request.app.state

    peer = request.client.host if request.client else None
    client_hash = hash_client_ip(client_ip_from_headers(request.headers.get("x-forwarded-for"), peer))
    client_type = simplify_user_agent(request.headers.get("user-agent"))

    if not state.rate_limiter.allow(client_hash):
        logger.warning(f"[{invocation_id}] Rate limit exceeded for client {client_hash}")
        return error_response(
            ERROR_RATE_LIMITED, 429, headers={"Retry-After": str(RATE_LIMIT_RETRY_AFTER_SEC)}
        )

    if not state.search_client.configured:
        logger.error(f"[{invocation_id}] Azure Search not configured")
        return error_response(ERROR_NOT_CONFIGURED, 503)

    try:
        body = await request.json()
    except ValueError:
        body = None

    message = body.get("message") if isinstance(body, dict) else None
    if not isinstance(message, str) or not message.strip():
        return error_response(ERROR_BAD_MESSAGE, 400)

    history = parse_history(body.get("conversationHistory"))
    logger.info(f"[{invocation_id}] Smart assistant request from {client_type} client {client_hash}")

    try:
        answer = await run_until_disconnect(
            request,
            run_smart_assistant(
                message,
                history,
                catalog=state.catalog,
                search_client=state.search_client,
                keyword_extractor=state.keyword_extractor,
                invocation_id=invocation_id,
            ),
        )
    except ClientDisconnected:
        logger.info(f"[{invocation_id}] Client disconnected, pipeline cancelled")
        return Response(status_code=CLIENT_CLOSED_REQUEST)
    except Exception as e:
        logger.exception(f"[{invocation_id}] Smart assistant failed: {type(e).__name__}: {e}")
        return error_response(ERROR_INTERNAL, 500)

    return json_response(answer.to_response())
