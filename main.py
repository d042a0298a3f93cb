import logging
from typing import Any, Dict

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.exceptions import HTTPException as StarletteHTTPException

import database
from config import get_settings
from errors import MalformedInput, SubmissionError
from submissions import submit_booking, submit_contact

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


class NoContentCORSMiddleware(CORSMiddleware):
    """Answers an accepted browser preflight with 204 No Content."""

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        if response.status_code != 200:
            return response
        headers = {
            key: value
            for key, value in response.headers.items()
            if key not in ("content-length", "content-type")
        }
        return Response(status_code=204, headers=headers)


app = FastAPI(title=f"{settings.brand_name} Forms Backend")

app.add_middleware(
    NoContentCORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.exception_handler(SubmissionError)
async def submission_error_handler(request: Request, exc: SubmissionError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as e:
        raise MalformedInput() from e


@app.get("/")
def read_root():
    return {"message": f"{settings.brand_name} API is running"}


@app.get("/health")
def health():
    """Report whether the database is reachable"""
    response: Dict[str, Any] = {
        "backend": "running",
        "database": "not connected",
        "database_name": None,
        "collections": [],
    }

    try:
        db = database.ensure_connected()
        response["database_name"] = db.name
        response["collections"] = db.list_collection_names()[:10]
        response["database"] = "connected"
    except Exception as e:
        logger.warning("Health check could not reach the database: %s", e)
        response["database"] = f"error: {str(e)[:80]}"

    return response


@app.post("/api/contact-us")
async def contact_us(request: Request):
    """Store a contact request and send the notification emails."""
    return await submit_contact(await read_json(request))


@app.post("/api/free-consultation")
async def free_consultation(request: Request):
    """Book a free consultation, one per email and date."""
    return await submit_booking(await read_json(request))


@app.options("/api/contact-us", status_code=204)
@app.options("/api/free-consultation", status_code=204)
def preflight():
    return Response(status_code=204)


if __name__ == "__main__":
    import uvicorn

    port = settings.port
    uvicorn.run(app, host="0.0.0.0", port=port)
