import httpx
import pytest

from carirs_api.api_clients.carirs import CariRSClient, build_provider
from carirs_api.config import Settings
from carirs_api.errors import ProviderError


def build_client(handler, max_retries: int = 0) -> CariRSClient:
    transport = httpx.MockTransport(handler)
    return CariRSClient(
        base_url="https://carirs.example.com/api/v1/",
        timeout_seconds=5.0,
        max_retries=max_retries,
        client_factory=lambda: httpx.AsyncClient(transport=transport, timeout=5.0),
    )


@pytest.mark.asyncio
async def test_remote_hospitals_lookup_sends_query_parameters():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/hospitals"
        assert dict(request.url.params) == {"type": "covid", "provinceId": "31prop"}
        return httpx.Response(200, json={"hospitals": [{"id": "3171793"}]})

    client = build_client(handler)
    payload = await client.get_hospitals("covid", "31prop")
    await client.close()

    assert payload == {"hospitals": [{"id": "3171793"}]}


@pytest.mark.asyncio
async def test_remote_maps_lookup_returns_payload_unchanged():
    body = {"data": {"id": "3171793", "gmaps": "https://maps.example.com/x"}, "extra": [1, 2]}

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/maps"
        assert request.url.params["hospitalId"] == "3171793"
        return httpx.Response(200, json=body)

    client = build_client(handler)
    assert await client.get_maps("3171793") == body


@pytest.mark.asyncio
async def test_remote_http_error_carries_status_and_body():
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": "upstream maintenance"})

    client = build_client(handler)
    with pytest.raises(ProviderError) as exc_info:
        await client.find_hospitals("fatmawati")

    assert exc_info.value.status == 503
    assert exc_info.value.body == {"error": "upstream maintenance"}
    api_error = exc_info.value.to_api_error()
    assert api_error is not None and api_error.status == 503


@pytest.mark.asyncio
async def test_remote_transport_error_has_no_status():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = build_client(handler)
    with pytest.raises(ProviderError) as exc_info:
        await client.get_provinces()

    assert exc_info.value.status is None
    assert exc_info.value.to_api_error() is None


@pytest.mark.asyncio
async def test_remote_retries_server_errors(monkeypatch):
    monkeypatch.setattr("carirs_api.api_clients.carirs.asyncio.sleep", _no_sleep)
    attempts = []

    def handler(_: httpx.Request) -> httpx.Response:
        attempts.append(1)
        if len(attempts) < 3:
            return httpx.Response(502, text="bad gateway")
        return httpx.Response(200, json={"provinces": []})

    client = build_client(handler, max_retries=2)
    assert await client.get_provinces() == {"provinces": []}
    assert len(attempts) == 3


@pytest.mark.asyncio
async def test_remote_does_not_retry_client_errors(monkeypatch):
    monkeypatch.setattr("carirs_api.api_clients.carirs.asyncio.sleep", _no_sleep)
    attempts = []

    def handler(_: httpx.Request) -> httpx.Response:
        attempts.append(1)
        return httpx.Response(404, text="no such hospital")

    client = build_client(handler, max_retries=3)
    with pytest.raises(ProviderError) as exc_info:
        await client.get_bed_details("covid", "0")

    assert exc_info.value.body == {"error": "no such hospital"}
    assert len(attempts) == 1


async def _no_sleep(_: float) -> None:
    return None


@pytest.mark.asyncio
async def test_dataset_mode_lookups():
    client = build_provider(Settings(_env_file=None))
    assert isinstance(client, CariRSClient) and not client.is_remote

    provinces = await client.get_provinces()
    assert {"id": "31prop", "name": "DKI Jakarta"} in provinces["provinces"]

    cities = await client.get_cities("31prop")
    assert len(cities["cities"]) == 5
    assert (await client.find_cities("jakarta pusat"))["cities"] == [{"id": "3173", "name": "Kota Jakarta Pusat"}]

    found = await client.find_hospitals("Jagakarsa", "covid")
    assert [hospital["id"] for hospital in found["hospitals"]] == ["3171432"]
    assert (await client.find_hospitals("sardjito", "covid"))["hospitals"] == []


@pytest.mark.asyncio
async def test_dataset_mode_bed_details_and_unknown_hospital():
    client = CariRSClient()

    details = await client.get_bed_details("covid", "3171793")
    assert details["data"]["name"] == "RSUP Fatmawati"
    assert [room["title"] for room in details["data"]["bed_detail"]] == [
        "ICU Tekanan Negatif dengan Ventilator",
        "Isolasi Tekanan Negatif",
    ]
    assert await client.get_bed_details("covid", "does-not-exist") == {"data": None}
    assert await client.get_maps("does-not-exist") == {"data": None}
