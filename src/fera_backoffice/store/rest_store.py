"""Record store over the hosted backend's REST interface (PostgREST dialect).

Row-level tenancy is enforced by the backend; the ``companyId`` filter sent
here only narrows what a non-global user asks for.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..core.enums import Collection
from ..core.exceptions import SyncError
from .payload import assemble_payload

logger = logging.getLogger(__name__)


class RestRecordStore:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        access_token: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._access_token = access_token
        self._client = client or httpx.Client(base_url=self.base_url, timeout=timeout)

    def set_access_token(self, access_token: Optional[str]) -> None:
        self._access_token = access_token

    def close(self) -> None:
        self._client.close()

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._access_token or self._api_key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }

    def _request(self, method: str, collection: Collection, **kwargs) -> httpx.Response:
        url = f"/rest/v1/{collection.value}"
        try:
            resp = self._client.request(method, url, headers=self._headers(), **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise SyncError(
                f"{method} {collection.value} falhou ({exc.response.status_code}): {exc.response.text[:200]}"
            ) from exc
        except httpx.HTTPError as exc:
            raise SyncError(f"{method} {collection.value} falhou: {exc}") from exc
        return resp

    def save(self, collection: Collection, record: dict[str, Any]) -> dict[str, Any]:
        row = dict(record)
        record_id = row.pop("id", None)
        if record_id:
            resp = self._request("PATCH", collection, params={"id": f"eq.{record_id}"}, json=row)
        else:
            resp = self._request("POST", collection, json=row)

        data = resp.json()
        if isinstance(data, list):
            if not data:
                raise SyncError(f"{collection.value}: registro {record_id} não encontrado")
            return data[0]
        return data

    def delete(self, collection: Collection, record_id: str) -> None:
        self._request("DELETE", collection, params={"id": f"eq.{record_id}"})

    def fetch_company_snapshot(self, company_id: Optional[str], is_global_role: bool) -> dict[str, Any]:
        rows: dict[Collection, list[dict[str, Any]]] = {}
        for collection in Collection:
            params = {"select": "*"}
            if not is_global_role:
                params["companyId"] = f"eq.{company_id}"
            rows[collection] = self._request("GET", collection, params=params).json()
        logger.debug("fetched snapshot company=%s global=%s", company_id, is_global_role)
        return assemble_payload(rows, company_id=company_id, is_global_role=is_global_role)
