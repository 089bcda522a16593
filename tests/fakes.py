"""In-memory Schema client used by the workflow tests."""

import copy

from storefront.commerce.context import SESSION_PATH
from storefront.schema.client import expand_path


class FakeSchemaClient:
    """In-memory stand-in for SchemaClient that records every call.

    Responses are registered per (method, resolved path). A registered callable
    receives the request payload and returns the response.
    """

    def __init__(self, session=None):
        self.session = dict(session or {})
        self.routes = {}
        self.calls = []

    def on(self, method, path, response):
        self.routes[(method, path)] = response
        return self

    async def request(self, method, path, data=None, session_id=None):
        url, payload = expand_path(path, data)
        self.calls.append((method, url, copy.deepcopy(payload)))

        if url == SESSION_PATH:
            if method == "PUT":
                self.session.update(payload)
            return dict(self.session)

        response = self.routes.get((method, url))
        if callable(response):
            return response(payload)
        return copy.deepcopy(response)

    async def get(self, path, data=None, session_id=None):
        return await self.request("GET", path, data, session_id)

    async def put(self, path, data=None, session_id=None):
        return await self.request("PUT", path, data, session_id)

    async def post(self, path, data=None, session_id=None):
        return await self.request("POST", path, data, session_id)

    async def delete(self, path, data=None, session_id=None):
        return await self.request("DELETE", path, data, session_id)

    def writes(self):
        return [call for call in self.calls if call[0] != "GET"]

    def calls_to(self, method, url):
        return [call for call in self.calls if call[0] == method and call[1] == url]


def merging(record):
    """Route handler that merges PUT payloads into record and returns it."""

    def handler(payload):
        record.update(payload)
        return copy.deepcopy(record)

    return handler


