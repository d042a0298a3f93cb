"""
Serverless entry points (API Gateway / Netlify Functions event format).

Deploy `functions.contact_us` and `functions.free_consultation` as the
handlers of the two functions. They share the workflow in submissions.py
with the FastAPI routes.
"""

import asyncio
import base64
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from config import get_settings
from errors import MalformedInput, SubmissionError
from submissions import submit_booking, submit_contact

logger = logging.getLogger(__name__)

Workflow = Callable[[Any], Awaitable[Dict[str, Any]]]


def cors_headers(event: Dict[str, Any]) -> Dict[str, str]:
    origins = get_settings().cors_origins
    headers = {
        "Access-Control-Allow-Methods": "POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }
    if "*" in origins:
        headers["Access-Control-Allow-Origin"] = "*"
        return headers

    request_headers = {k.lower(): v for k, v in (event.get("headers") or {}).items()}
    origin = request_headers.get("origin")
    if origin in origins:
        headers["Access-Control-Allow-Origin"] = origin
        headers["Vary"] = "Origin"
    return headers


def _response(status_code: int, headers: Dict[str, str], body: Optional[Dict[str, Any]] = None):
    response: Dict[str, Any] = {"statusCode": status_code, "headers": headers}
    if body is not None:
        response["headers"] = dict(headers, **{"Content-Type": "application/json"})
        response["body"] = json.dumps(body)
    return response


def _load_body(event: Dict[str, Any]) -> Any:
    raw = event.get("body")
    if raw is None:
        raise MalformedInput()
    try:
        if event.get("isBase64Encoded"):
            raw = base64.b64decode(raw).decode("utf-8")
        return json.loads(raw)
    except ValueError as e:
        raise MalformedInput() from e


def _handle(name: str, workflow: Workflow, event: Dict[str, Any]) -> Dict[str, Any]:
    headers = cors_headers(event)
    method = (event.get("httpMethod") or "").upper()

    if method == "OPTIONS":
        return _response(204, headers)
    if method != "POST":
        return _response(405, headers, {"message": "Method not allowed"})

    try:
        result = asyncio.run(workflow(_load_body(event)))
    except SubmissionError as e:
        return _response(e.status_code, headers, {"message": e.message})
    except Exception:
        logger.exception("%s: unexpected error", name)
        return _response(500, headers, {"message": "Server error"})
    return _response(200, headers, result)


def contact_us(event, context=None):
    return _handle("contact-us", submit_contact, event)


def free_consultation(event, context=None):
    return _handle("free-consultation", submit_booking, event)
