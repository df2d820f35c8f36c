"""Remote document store over HTTP (httpx).

Documents live under ``{base_url}/{bucket}/{scope}/{collection}``:

- ``GET    /``        -> JSON list of project documents
- ``GET    /{name}``  -> one document (404 when missing)
- ``PUT    /{name}``  -> upsert; with ``If-Match: *`` the document must exist
- ``DELETE /{name}``  -> delete (404 when missing)
"""

import logging
import time
from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from venom.core.errors import NotFound, OperationFailed, StoreUnavailable
from venom.database.store import ProjectStore
from venom.models import Project

logger = logging.getLogger(__name__)

# Pause between readiness probes
READY_POLL_INTERVAL = 0.25


class HttpProjectStore(ProjectStore):
    """Project documents in a remote HTTP document store."""

    def __init__(
        self,
        base_url: str,
        bucket: str = "venom",
        scope: str = "mindsnap",
        collection: str = "projects",
        token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """Initialize the store client.

        Args:
            base_url: Server URL, e.g. http://localhost:8091.
            bucket: Top-level document namespace.
            scope: Scope inside the bucket.
            collection: Collection holding project documents.
            token: Optional bearer token.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (tests pass a MockTransport).
        """
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._prefix = "/" + "/".join(quote(p, safe="") for p in (bucket, scope, collection))
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def _doc_path(self, name: str) -> str:
        return f"{self._prefix}/{quote(name, safe='')}"

    def _request(self, method: str, path: str, operation: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s: %s", method, path, type(e).__name__, e)
            raise OperationFailed(f"{operation} failed: {e}", operation=operation) from e

    @staticmethod
    def _check(response: httpx.Response, operation: str) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise OperationFailed(
                f"{operation} failed: HTTP {response.status_code}", operation=operation
            ) from e

    @staticmethod
    def _json(response: httpx.Response, operation: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise OperationFailed(
                f"{operation} failed: response is not JSON", operation=operation
            ) from e

    @staticmethod
    def _parse(data: Any, operation: str) -> Project:
        try:
            return Project.model_validate(data)
        except ValidationError as e:
            raise OperationFailed(f"Invalid document: {e}", operation=operation) from e

    def wait_until_ready(self, timeout: float) -> None:
        """Probe the collection until it answers or ``timeout`` elapses."""
        deadline = time.monotonic() + timeout
        last_error = "no response"
        while True:
            try:
                response = self._client.get(self._prefix, timeout=timeout)
                if response.status_code < 500:
                    response.raise_for_status()
                    logger.debug("HTTP store ready at %s", self._client.base_url)
                    return
                last_error = f"HTTP {response.status_code}"
            except httpx.HTTPStatusError as e:
                raise StoreUnavailable(
                    f"Store rejected connection: HTTP {e.response.status_code}"
                ) from e
            except httpx.HTTPError as e:
                last_error = f"{type(e).__name__}: {e}"
            if time.monotonic() >= deadline:
                logger.error("HTTP store not ready after %.1fs: %s", timeout, last_error)
                raise StoreUnavailable(
                    f"Store at {self._client.base_url} not ready: {last_error}"
                )
            time.sleep(READY_POLL_INTERVAL)

    def list_all(self) -> dict[str, Project]:
        """Return every project keyed by name."""
        response = self._request("GET", self._prefix, "list")
        self._check(response, "list")
        documents = self._json(response, "list")
        if not isinstance(documents, list):
            raise OperationFailed("list failed: expected a JSON list", operation="list")
        projects = [self._parse(doc, "list") for doc in documents]
        return {project.name: project for project in projects}

    def get(self, name: str) -> Project:
        """Return one project or raise NotFound."""
        response = self._request("GET", self._doc_path(name), "get")
        if response.status_code == 404:
            raise NotFound(name, operation="get")
        self._check(response, "get")
        return self._parse(self._json(response, "get"), "get")

    def create(self, project: Project) -> str:
        """Upsert by name (existing documents are overwritten)."""
        response = self._request(
            "PUT", self._doc_path(project.name), "create", json=project.model_dump()
        )
        self._check(response, "create")
        return project.name

    def update(self, name: str, project: Project) -> Project:
        """Replace an existing document; the key is always ``name``."""
        stored = project.model_copy(update={"name": name}, deep=True)
        response = self._request(
            "PUT",
            self._doc_path(name),
            "update",
            json=stored.model_dump(),
            headers={"If-Match": "*"},
        )
        if response.status_code in (404, 412):
            raise NotFound(name, operation="update")
        self._check(response, "update")
        if response.content:
            return self._parse(self._json(response, "update"), "update")
        return stored

    def delete(self, name: str) -> None:
        """Delete a document or raise NotFound."""
        response = self._request("DELETE", self._doc_path(name), "delete")
        if response.status_code == 404:
            raise NotFound(name, operation="delete")
        self._check(response, "delete")

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()
