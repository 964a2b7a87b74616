from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterator, List

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookgen.content.scorer import ContentValidator
from bookgen.content.verification import build_verifier
from bookgen.core.config import BookConfig, load_book_config
from bookgen.core.errors import (
    BookGenError,
    CircularDependencyError,
    UnknownPrerequisiteError,
    ValidationFailure,
    VerificationError,
)
from bookgen.generation.pipeline import generate_book
from bookgen.syllabus.models import Topic
from bookgen.syllabus.parser import normalize_topic

REPO_ROOT = Path(__file__).resolve().parents[2]
SERVICE_NAME = "Book Generation API"
LOGGER = logging.getLogger(__name__)

DEFAULT_TOPIC = {
    "id": "default-topic",
    "title": "Default Topic",
    "description": "Default topic for validation",
    "learningObjectives": [],
}


class BookApiSettings(BaseModel):
    """Runtime configuration for the book API."""

    output_dir: Path = Field(default=REPO_ROOT / "docs")
    config_path: Path | None = None

    def load_config(self) -> BookConfig:
        config = load_book_config(self.config_path)
        book = config.book.model_copy(update={"output_dir": self.output_dir})
        return config.model_copy(update={"book": book})


@lru_cache
def get_settings() -> BookApiSettings:
    output_dir = os.getenv("BOOKGEN_OUTPUT_DIR")
    config_path = os.getenv("BOOKGEN_CONFIG")
    return BookApiSettings(
        output_dir=Path(output_dir).expanduser().resolve() if output_dir else REPO_ROOT / "docs",
        config_path=Path(config_path).expanduser().resolve() if config_path else None,
    )


def get_book_config(settings: BookApiSettings = Depends(get_settings)) -> BookConfig:
    return settings.load_config()


def get_content_validator(config: BookConfig = Depends(get_book_config)) -> Iterator[ContentValidator]:
    with ContentValidator(build_verifier(config.verification), config=config.scoring) as validator:
        yield validator


class GenerateBookRequest(BaseModel):
    """Raw syllabus payload; field types are checked by the syllabus validator, not here."""

    model_config = ConfigDict(extra="allow")

    title: Any = None
    description: Any = None
    author: Any = None
    topics: Any = None


class ValidateContentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: Any = None
    syllabus_topics: Any = Field(default=None, alias="syllabusTopics")
    verification_sources: List[str] = Field(default_factory=list, alias="verificationSources")


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    service: str


app = FastAPI(
    title=SERVICE_NAME,
    description="API for generating technical books from syllabus topics",
    version="1.0.0",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    if request.url.path == "/api/validate-content":
        return JSONResponse(status_code=status_code, content={"isValid": False, "error": message})
    return JSONResponse(status_code=status_code, content={"status": "error", "message": message})


@app.exception_handler(BookGenError)
@app.exception_handler(ValueError)
@app.exception_handler(OSError)
async def _internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Request to %s failed", request.url.path)
    return _error_response(request, 500, str(exc))


@app.exception_handler(Exception)
async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Unhandled error on %s", request.url.path)
    return _error_response(request, 500, "Internal server error")


@app.exception_handler(StarletteHTTPException)
async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"error": "Route not found", "path": request.url.path})
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.post("/api/generate-book", summary="Generate a technical book from a syllabus")
def generate_book_endpoint(
    request: GenerateBookRequest,
    config: BookConfig = Depends(get_book_config),
) -> JSONResponse:
    """Creates a Docusaurus-based technical book from provided syllabus topics."""
    if not isinstance(request.topics, list) or not request.topics:
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid syllabus input: topics array is required", "status": "error"},
        )

    payload = request.model_dump(exclude_none=True)
    try:
        result = generate_book(payload, config.book)
    except ValidationFailure as exc:
        return JSONResponse(status_code=400, content={"status": "error", "message": str(exc), "errors": exc.errors})
    except CircularDependencyError as exc:
        body: Dict[str, Any] = {"status": "error", "message": str(exc), "unresolved": exc.unresolved_ids}
        if isinstance(exc, UnknownPrerequisiteError):
            body["unknownPrerequisites"] = exc.unknown
        return JSONResponse(status_code=400, content=body)
    except OSError as exc:
        LOGGER.exception("Book generation failed")
        return JSONResponse(status_code=500, content={"status": "error", "message": str(exc)})
    return JSONResponse(status_code=200, content=result.to_payload())


@app.post("/api/validate-content", summary="Validate book content compliance")
def validate_content_endpoint(
    request: ValidateContentRequest,
    validator: ContentValidator = Depends(get_content_validator),
) -> JSONResponse:
    """Validates that generated content complies with syllabus requirements.

    Only the first entry of ``syllabusTopics`` is scored.
    """
    if not isinstance(request.content, str) or not isinstance(request.syllabus_topics, list):
        return JSONResponse(
            status_code=400,
            content={
                "isValid": False,
                "error": "Invalid request: content string and syllabusTopics array are required",
            },
        )

    raw_topic = request.syllabus_topics[0] if request.syllabus_topics else DEFAULT_TOPIC
    try:
        topic = Topic.model_validate(normalize_topic(raw_topic))
    except PydanticValidationError as exc:
        return JSONResponse(status_code=400, content={"isValid": False, "error": f"Invalid syllabus topic: {exc}"})

    try:
        report = validator.validate(request.content, topic, request.verification_sources)
    except VerificationError as exc:
        LOGGER.error("Verification failed for topic %s: %s", topic.id, exc)
        return JSONResponse(status_code=500, content={"isValid": False, "error": str(exc)})
    return JSONResponse(status_code=200, content=report.to_payload())


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="healthy", timestamp=datetime.now(timezone.utc), service=SERVICE_NAME)


@app.get("/api/spec")
def api_spec() -> Dict[str, Any]:
    """Abbreviated OpenAPI document: info plus summary/description per operation."""
    full = app.openapi()
    paths: Dict[str, Dict[str, Any]] = {}
    for path, operations in full.get("paths", {}).items():
        if not path.startswith("/api/") or path == "/api/spec":
            continue
        paths[path] = {
            method: {key: operation[key] for key in ("summary", "description") if key in operation}
            for method, operation in operations.items()
        }
    return {"openapi": full.get("openapi"), "info": full.get("info"), "paths": paths}
