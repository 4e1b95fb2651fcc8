"""json-server style REST record store.

Routes follow the json-server conventions the record collections were
served with:

    GET    /<collection>?field=value
    GET    /<collection>/<id>
    POST   /<collection>
    PUT    /<collection>/<id>
    DELETE /<collection>/<id>
"""

import asyncio
from typing import Any, Mapping, Optional
from urllib.parse import quote

import requests

from recordview.domain.entities import RecordId
from recordview.domain.errors import RecordNotFoundError, StoreError, record_not_found
from recordview.store.base import RecordStore, to_json_payload
from recordview.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 10.0


class RestRecordStore(RecordStore):
    """Record store backed by a REST endpoint."""

    def __init__(
        self,
        base_url: str,
        collection: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the HTTP store.

        Args:
            base_url: Server root, e.g. ``http://localhost:3001``
            collection: Collection path segment, e.g. ``expenses``
            timeout: Per-request timeout in seconds
            session: Optional preconfigured requests session
        """
        self.base_url = base_url.rstrip("/")
        self.collection = collection.strip("/")
        self.timeout = timeout
        self._session = session

    def _get_session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(
                {"Content-Type": "application/json", "Accept": "application/json"}
            )
        return self._session

    def disconnect(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def _url(self, record_id: Optional[RecordId] = None) -> str:
        url = f"{self.base_url}/{self.collection}"
        if record_id is not None:
            url = f"{url}/{quote(str(record_id), safe='')}"
        return url

    def _request(
        self,
        method: str,
        record_id: Optional[RecordId] = None,
        **kwargs,
    ) -> Any:
        """Make a request and decode the JSON body.

        Raises:
            RecordNotFoundError: On HTTP 404 for a single record
            StoreError: On transport errors, other HTTP errors or invalid JSON
        """
        url = self._url(record_id)
        logger.debug("%s %s", method, url)
        try:
            response = self._get_session().request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise StoreError(f"Could not reach {self.base_url}: {e}") from e

        if response.status_code == 404 and record_id is not None:
            raise RecordNotFoundError(record_not_found("record", record_id))
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise StoreError(f"{method} {url} failed with status {response.status_code}") from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise StoreError(f"{method} {url} returned invalid JSON") from e

    async def _call(self, method: str, record_id: Optional[RecordId] = None, **kwargs) -> Any:
        return await asyncio.to_thread(self._request, method, record_id, **kwargs)

    async def list_records(self, params: Optional[Mapping[str, Any]] = None) -> list[dict]:
        query = {key: str(value) for key, value in (params or {}).items() if value is not None}
        data = await self._call("GET", params=query or None)
        if not isinstance(data, list):
            raise StoreError(f"GET {self._url()} did not return a list")
        return data

    async def create_record(self, fields: Mapping[str, Any]) -> dict:
        payload = to_json_payload({key: value for key, value in fields.items() if key != "id"})
        return await self._call("POST", json=payload)

    async def update_record(self, record_id: RecordId, fields: Mapping[str, Any]) -> dict:
        payload = to_json_payload({key: value for key, value in fields.items() if key != "id"})
        payload["id"] = record_id
        return await self._call("PUT", record_id, json=payload)

    async def delete_record(self, record_id: RecordId) -> None:
        await self._call("DELETE", record_id)

    async def get_record(self, record_id: RecordId) -> dict:
        return await self._call("GET", record_id)
