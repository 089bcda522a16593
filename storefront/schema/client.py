"""
Schema API Client
Handles authenticated REST calls against the hosted Schema commerce API
"""
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote
import copy
import json
import logging
import re

import httpx

from storefront.config import settings
from storefront.utils.cache import ResponseCache, make_cache_key

logger = logging.getLogger(__name__)

SESSION_HEADER = "X-Session"

_PLACEHOLDER = re.compile(r"\{(\w+)\}")

class SchemaApiError(Exception):
    """Raised when the Schema API cannot be reached or answers unexpectedly"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

def has_errors(record: Any) -> bool:
    """Check whether a response is an error-bearing record"""
    return isinstance(record, dict) and "errors" in record

def expand_path(path: str, data: Optional[Dict] = None) -> Tuple[str, Dict]:
    """
    Fill {placeholders} in a resource path from data

    Args:
        path: Path template, e.g. "/carts/{id}"
        data: Request data; consumed keys are removed from the returned payload

    Returns:
        Resolved path and the remaining payload
    """
    remaining = dict(data or {})

    def substitute(match: re.Match) -> str:
        name = match.group(1)
        value = remaining.pop(name, None)
        if value is None:
            raise ValueError(f"Missing value for '{name}' in {path}")
        return quote(str(value), safe="")

    return _PLACEHOLDER.sub(substitute, path), remaining

def is_action_path(path: str) -> bool:
    """Action resources like /:sessions/:current or /accounts/:login are never cached"""
    return any(part.startswith(":") for part in path.split("/"))

def encode_params(data: Dict) -> Dict[str, str]:
    """Encode query parameters; nested values are sent as JSON"""
    params = {}
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, bool):
            params[key] = "true" if value else "false"
        elif isinstance(value, (dict, list)):
            params[key] = json.dumps(value)
        else:
            params[key] = str(value)
    return params

class SchemaClient:
    """Schema REST API client"""

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_key: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        cache: Optional[ResponseCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.client_id = client_id or settings.SCHEMA_CLIENT_ID
        self.client_key = client_key or settings.SCHEMA_CLIENT_KEY
        self.api_url = (api_url or settings.SCHEMA_API_URL).rstrip("/")

        if not self.client_id or not self.client_key:
            raise ValueError("SCHEMA_CLIENT_ID and SCHEMA_CLIENT_KEY are required to connect to Schema")

        if cache is None and settings.CACHE_ENABLED:
            cache = ResponseCache(
                max_size=settings.CACHE_MAX_SIZE,
                ttl_seconds=settings.CACHE_TTL_SECONDS
            )
        self.cache = cache

        self.client = httpx.AsyncClient(
            base_url=self.api_url,
            auth=httpx.BasicAuth(self.client_id, self.client_key),
            headers={"Accept": "application/json"},
            timeout=timeout_seconds or settings.SCHEMA_TIMEOUT_SECONDS,
            transport=transport
        )

    async def request(
        self,
        method: str,
        path: str,
        data: Optional[Dict] = None,
        session_id: Optional[str] = None
    ) -> Any:
        """
        Perform a request against a resource path

        Args:
            method: HTTP method (GET, PUT, POST, DELETE)
            path: Resource path template
            data: Path values plus query (GET) or body (others)
            session_id: Visitor session forwarded for session affinity

        Returns:
            Decoded record/collection, an error-bearing record, or None if not found
        """
        url, payload = expand_path(path, data)
        headers = {SESSION_HEADER: session_id} if session_id else {}

        cache_key = None
        if method == "GET" and self.cache is not None and not is_action_path(url):
            cache_key = make_cache_key(session_id, url, payload)
            cached = self.cache.get(cache_key)
            if cached is not None:
                return copy.deepcopy(cached)

        logger.debug("%s %s", method, url)
        try:
            if method == "GET":
                response = await self.client.request(method, url, params=encode_params(payload), headers=headers)
            else:
                response = await self.client.request(method, url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise SchemaApiError(f"{method} {url} failed: {e}") from e

        result = self._handle_response(method, url, response)

        if method != "GET" and self.cache is not None:
            self.cache.invalidate(url)
        elif cache_key is not None and result is not None and not has_errors(result):
            self.cache.set(cache_key, copy.deepcopy(result))

        return result

    def _handle_response(self, method: str, url: str, response: httpx.Response) -> Any:
        """Map an HTTP response to a record, an error record, None, or an exception"""
        if response.status_code == 404:
            return None

        body = None
        if response.content:
            try:
                body = response.json()
            except ValueError:
                if response.is_success:
                    raise SchemaApiError(f"{method} {url} returned invalid JSON", response.status_code)

        if response.is_success:
            return body

        if response.is_client_error and has_errors(body):
            logger.debug("%s %s rejected: %s", method, url, body["errors"])
            return body

        logger.error("%s %s returned %s", method, url, response.status_code)
        raise SchemaApiError(f"{method} {url} returned {response.status_code}", response.status_code)

    async def get(self, path: str, data: Optional[Dict] = None, session_id: Optional[str] = None) -> Any:
        """Schema GET request"""
        return await self.request("GET", path, data, session_id)

    async def put(self, path: str, data: Optional[Dict] = None, session_id: Optional[str] = None) -> Any:
        """Schema PUT request"""
        return await self.request("PUT", path, data, session_id)

    async def post(self, path: str, data: Optional[Dict] = None, session_id: Optional[str] = None) -> Any:
        """Schema POST request"""
        return await self.request("POST", path, data, session_id)

    async def delete(self, path: str, data: Optional[Dict] = None, session_id: Optional[str] = None) -> Any:
        """Schema DELETE request"""
        return await self.request("DELETE", path, data, session_id)

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool"""
        await self.client.aclose()

# Singleton instance
_schema_client = None

def get_schema_client() -> SchemaClient:
    """Get or create Schema client instance"""
    global _schema_client
    if _schema_client is None:
        _schema_client = SchemaClient()
    return _schema_client

async def close_schema_client() -> None:
    """Close the shared Schema client, if one was created"""
    global _schema_client
    if _schema_client is not None:
        await _schema_client.aclose()
        _schema_client = None
