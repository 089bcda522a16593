"""
Per-request store context
Carries the visitor session id and the current session record for one request
"""
from typing import Any, Dict, Mapping, Optional
import logging

from storefront.commerce.models import Session, load_record
from storefront.schema.client import SchemaClient, has_errors

logger = logging.getLogger(__name__)

SESSION_PATH = "/:sessions/:current"

class StoreContext:
    """
    Request-scoped access to the Schema API on behalf of one visitor
    Created at the start of a request and discarded at the end
    """

    def __init__(self, client: SchemaClient, session_id: Optional[str] = None):
        self.client = client
        self.session_id = session_id
        self._session: Optional[Session] = None

    async def get(self, path: str, data: Optional[Dict] = None) -> Any:
        return await self.client.get(path, data, session_id=self.session_id)

    async def put(self, path: str, data: Optional[Dict] = None) -> Any:
        return await self.client.put(path, data, session_id=self.session_id)

    async def post(self, path: str, data: Optional[Dict] = None) -> Any:
        return await self.client.post(path, data, session_id=self.session_id)

    async def delete(self, path: str, data: Optional[Dict] = None) -> Any:
        return await self.client.delete(path, data, session_id=self.session_id)

    async def get_session(self) -> Session:
        """Get current visitor session, fetching it once per request"""
        if self._session is None:
            result = await self.get(SESSION_PATH)
            if has_errors(result):
                logger.warning("Could not load session: %s", result["errors"])
                result = None
            self._session = load_record(result or {}, Session)
        return self._session

    async def put_session(self, data: Mapping[str, Any]) -> Session:
        """
        Update current visitor session
        Supplied keys are merged server-side; None clears a key

        Returns:
            The full updated session
        """
        result = await self.put(SESSION_PATH, dict(data))
        if has_errors(result):
            logger.warning("Could not update session: %s", result["errors"])
            return await self.get_session()
        if not result:
            result = {**(await self.get_session()).model_dump(), **data}
        self._session = load_record(result, Session)
        return self._session
