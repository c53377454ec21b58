from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import httpx

from ..config import Settings
from ..errors import ProviderError
from ..logging_config import logger
from .base import HospitalProvider
from .dataset import MockDataset


class CariRSClient(HospitalProvider):
    """Client for a carirs-compatible upstream with a bundled-data fallback.

    When ``base_url`` is set, every lookup is a ``GET`` against the upstream
    using the same paths and query names this service exposes. Without it,
    lookups are answered from the bundled dataset.
    """

    name = "carirs"

    def __init__(
        self,
        base_url: str | None = None,
        timeout_seconds: float = 10.0,
        max_retries: int = 0,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
        dataset: MockDataset | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/") if base_url else None
        self._timeout = timeout_seconds
        self._max_retries = max_retries
        self._client_factory = client_factory or self._default_client
        self._client: httpx.AsyncClient | None = None
        self._dataset = dataset or MockDataset()

    @classmethod
    def from_settings(cls, settings: Settings) -> "CariRSClient":
        return cls(
            base_url=settings.carirs_base_url,
            timeout_seconds=settings.request_timeout_seconds,
            max_retries=settings.request_max_retries,
        )

    @property
    def is_remote(self) -> bool:
        return self.base_url is not None

    async def get_provinces(self) -> dict[str, Any]:
        if not self.is_remote:
            return self._dataset.provinces()
        return await self._call_with_retry("/provinces", {})

    async def find_provinces(self, q: str) -> dict[str, Any]:
        if not self.is_remote:
            return self._dataset.provinces(q=q)
        return await self._call_with_retry("/provinces", {"q": q})

    async def get_cities(self, province_id: str) -> dict[str, Any]:
        if not self.is_remote:
            return self._dataset.cities(province_id=province_id)
        return await self._call_with_retry("/cities", {"provinceId": province_id})

    async def find_cities(self, q: str | None) -> dict[str, Any]:
        if not self.is_remote:
            return self._dataset.cities(q=q)
        return await self._call_with_retry("/cities", {"q": q})

    async def get_hospitals(self, hospital_type: str, province_id: str, city_id: str | None = None) -> dict[str, Any]:
        if not self.is_remote:
            return self._dataset.hospitals(hospital_type, province_id, city_id)
        params = {"type": hospital_type, "provinceId": province_id, "cityId": city_id}
        return await self._call_with_retry("/hospitals", params)

    async def find_hospitals(self, q: str, hospital_type: str | None = None) -> dict[str, Any]:
        if not self.is_remote:
            return self._dataset.search_hospitals(q, hospital_type)
        return await self._call_with_retry("/hospitals", {"q": q, "type": hospital_type})

    async def get_bed_details(self, hospital_type: str, hospital_id: str) -> dict[str, Any]:
        if not self.is_remote:
            return self._dataset.bed_details(hospital_type, hospital_id)
        return await self._call_with_retry("/bedDetails", {"type": hospital_type, "hospitalId": hospital_id})

    async def get_maps(self, hospital_id: str) -> dict[str, Any]:
        if not self.is_remote:
            return self._dataset.maps(hospital_id)
        return await self._call_with_retry("/maps", {"hospitalId": hospital_id})

    async def close(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        await client.aclose()

    def _default_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout)

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    async def _call_with_retry(self, path: str, params: dict[str, str | None]) -> dict[str, Any]:
        backoff = 0.5
        for attempt in range(self._max_retries + 1):
            try:
                return await self._call_api(path, params)
            except ProviderError as exc:
                # 4xx answers are final
                if exc.status is not None and exc.status < 500:
                    raise
                if attempt == self._max_retries:
                    raise
                logger.warning("provider.retry", provider=self.name, path=path, attempt=attempt + 1, error=str(exc))
                await asyncio.sleep(backoff)
                backoff *= 2
        raise ProviderError(f"{self.name} lookup failed")  # pragma: no cover - loop always returns or raises

    async def _call_api(self, path: str, params: dict[str, str | None]) -> dict[str, Any]:
        query = {key: value for key, value in params.items() if value}
        url = f"{self.base_url}{path}"
        logger.info("provider.request", provider=self.name, path=path, params=query)
        try:
            response = await self._http().get(url, params=query, headers={"Accept": "application/json"})
        except httpx.HTTPError as exc:
            logger.warning("provider.error", provider=self.name, path=path, error=str(exc))
            raise ProviderError(f"{self.name} request to {path} failed") from exc
        if response.is_error:
            logger.warning("provider.error", provider=self.name, path=path, status=response.status_code)
            raise ProviderError(
                f"{self.name} returned HTTP {response.status_code} for {path}",
                status=response.status_code,
                body=_error_body(response),
            )
        try:
            return response.json()
        except ValueError as exc:
            raise ProviderError(f"{self.name} returned a non-JSON body for {path}") from exc


def _error_body(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {"error": response.text or response.reason_phrase}
    if isinstance(body, dict):
        return body
    return {"error": body}


def build_provider(settings: Settings) -> HospitalProvider:
    return CariRSClient.from_settings(settings)
