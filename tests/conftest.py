from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

from carirs_api.api_clients.base import HospitalProvider
from carirs_api.app import create_app
from carirs_api.config import Settings


class StubProvider(HospitalProvider):
    """Records every lookup and answers with payloads echoing its arguments."""

    name = "stub"

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.error: Exception | None = None
        self.closed = False

    async def _answer(self, operation: str, *args: Any) -> dict[str, Any]:
        self.calls.append((operation, args))
        if self.error is not None:
            raise self.error
        return {"operation": operation, "args": list(args)}

    async def get_provinces(self) -> dict[str, Any]:
        return await self._answer("get_provinces")

    async def find_provinces(self, q: str) -> dict[str, Any]:
        return await self._answer("find_provinces", q)

    async def get_cities(self, province_id: str) -> dict[str, Any]:
        return await self._answer("get_cities", province_id)

    async def find_cities(self, q: str | None) -> dict[str, Any]:
        return await self._answer("find_cities", q)

    async def get_hospitals(self, hospital_type: str, province_id: str, city_id: str | None = None) -> dict[str, Any]:
        return await self._answer("get_hospitals", hospital_type, province_id, city_id)

    async def find_hospitals(self, q: str, hospital_type: str | None = None) -> dict[str, Any]:
        return await self._answer("find_hospitals", q, hospital_type)

    async def get_bed_details(self, hospital_type: str, hospital_id: str) -> dict[str, Any]:
        return await self._answer("get_bed_details", hospital_type, hospital_id)

    async def get_maps(self, hospital_id: str) -> dict[str, Any]:
        return await self._answer("get_maps", hospital_id)

    async def close(self) -> None:
        self.closed = True

    def operations(self) -> list[str]:
        return [operation for operation, _ in self.calls]


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    for key in ("CACHE_BACKEND", "CARIRS_BASE_URL", "REDIS_URL", "PORT"):
        monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture()
def stub_provider() -> StubProvider:
    return StubProvider()


@pytest.fixture()
def stateless_settings() -> Settings:
    return Settings(_env_file=None, cache_backend="none")


@pytest.fixture()
def cached_settings() -> Settings:
    return Settings(_env_file=None, cache_backend="memory")


@pytest.fixture()
def client(stateless_settings: Settings, stub_provider: StubProvider):
    with TestClient(create_app(stateless_settings, provider=stub_provider)) as test_client:
        yield test_client


@pytest.fixture()
def cached_client(cached_settings: Settings, stub_provider: StubProvider):
    with TestClient(create_app(cached_settings, provider=stub_provider)) as test_client:
        yield test_client


@pytest.fixture()
def dataset_client(stateless_settings: Settings):
    with TestClient(create_app(stateless_settings)) as test_client:
        yield test_client
