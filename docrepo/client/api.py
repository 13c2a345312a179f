"""HTTP access to the catalog API for the listing controller."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx
from pydantic import AliasChoices, BaseModel, Field, ValidationError

from docrepo.client.state import DocumentQuery
from docrepo.models.document import CategoryCount, DocumentPage

logger = logging.getLogger(__name__)


class FetchError(RuntimeError):
    """Transport failure, non-2xx status, or a response of the wrong shape."""


class DocumentLister(Protocol):
    async def load_documents(self, query: DocumentQuery) -> DocumentPage: ...


class CategorySource(Protocol):
    async def list_categories(self) -> list[CategoryCount]: ...


class _CategoryPayload(BaseModel):
    # Admin pages historically emitted category_name / file_count
    name: str = Field(validation_alias=AliasChoices("name", "category_name"))
    count: int = Field(ge=0, validation_alias=AliasChoices("count", "file_count"))


class ApiClient:
    """Implements :class:`DocumentLister` and :class:`CategorySource` over httpx."""

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    @classmethod
    def connect(cls, base_url: str, **client_kwargs: Any) -> ApiClient:
        return cls(httpx.AsyncClient(base_url=base_url, **client_kwargs))

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _get_json(self, path: str, params: dict | None = None) -> Any:
        try:
            resp = await self._http.get(path, params=params)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise FetchError(f"GET {path} failed: {exc}") from exc
        try:
            return resp.json()
        except ValueError as exc:
            raise FetchError(f"GET {path} returned non-JSON body") from exc

    async def load_documents(self, query: DocumentQuery) -> DocumentPage:
        payload = await self._get_json("/api/documents", params=query.params())
        try:
            return DocumentPage.model_validate(payload)
        except ValidationError as exc:
            raise FetchError("Unexpected document listing shape") from exc

    async def list_categories(self) -> list[CategoryCount]:
        payload = await self._get_json("/api/categories")
        if not isinstance(payload, list):
            raise FetchError("Unexpected category listing shape")
        try:
            items = [_CategoryPayload.model_validate(item) for item in payload]
        except ValidationError as exc:
            raise FetchError("Unexpected category listing shape") from exc
        return [CategoryCount(name=i.name, count=i.count) for i in items]
