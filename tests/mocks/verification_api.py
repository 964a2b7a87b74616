"""In-process stand-in for the documentation-verification service."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
from fastapi import Depends, FastAPI, Header, HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel, Field


class VerifyPayload(BaseModel):
    content: str
    topic: str
    sources: List[str] = Field(default_factory=list)


class VerifyResponse(BaseModel):
    isVerified: bool
    verifiedSources: List[str]
    confidenceScore: float
    issues: List[Dict[str, str]] = Field(default_factory=list)
    topic: str


class VerificationAPIMock:
    """Scores a chapter by the share of requested sources its text mentions.

    Set ``fail_with`` to an HTTP status to make every call fail; ``requests``
    records accepted calls with their Authorization header.
    """

    def __init__(self, *, base_url: str = "http://verify-mock.local", token: Optional[str] = "test-token") -> None:
        self.base_url = base_url
        self.token = token
        self.fail_with: Optional[int] = None
        self.requests: List[Dict[str, Any]] = []
        self._clients: List[httpx.Client] = []
        self.app = self._build_app()

    def _authorize(self, authorization: Optional[str] = Header(default=None)) -> Optional[str]:
        if self.token and authorization != f"Bearer {self.token}":
            raise HTTPException(status_code=401, detail="invalid token")
        return authorization

    def _build_app(self) -> FastAPI:
        app = FastAPI(title="verification-mock")

        @app.post("/api/verify", response_model=VerifyResponse)
        def verify(payload: VerifyPayload, authorization: Optional[str] = Depends(self._authorize)) -> VerifyResponse:
            if self.fail_with is not None:
                raise HTTPException(status_code=self.fail_with, detail="verification backend unavailable")
            self.requests.append({"payload": payload.model_dump(), "authorization": authorization})

            text = payload.content.lower()
            matched = [source for source in payload.sources if source.lower() in text]
            confidence = 100.0 * len(matched) / len(payload.sources) if payload.sources else 0.0
            return VerifyResponse(
                isVerified=confidence >= 70,
                verifiedSources=matched,
                confidenceScore=confidence,
                topic=payload.topic,
            )

        return app

    def build_httpx_client(self) -> httpx.Client:
        """Client wired to the app in-process; ``TestClient`` is an ``httpx.Client``."""
        client = TestClient(self.app, base_url=self.base_url)
        self._clients.append(client)
        return client

    def close(self) -> None:
        while self._clients:
            self._clients.pop().close()
