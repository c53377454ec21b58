from __future__ import annotations

from typing import Any

HOSPITAL_TYPES = ("covid", "noncovid")


class HospitalProvider:
    """Async lookup interface over the hospital bed-availability data source.

    Payloads are returned as plain JSON-compatible objects and passed through
    to API consumers unchanged.
    """

    name: str

    async def get_provinces(self) -> dict[str, Any]:  # pragma: no cover - interface
        raise NotImplementedError

    async def find_provinces(self, q: str) -> dict[str, Any]:  # pragma: no cover - interface
        raise NotImplementedError

    async def get_cities(self, province_id: str) -> dict[str, Any]:  # pragma: no cover - interface
        raise NotImplementedError

    async def find_cities(self, q: str | None) -> dict[str, Any]:  # pragma: no cover - interface
        raise NotImplementedError

    async def get_hospitals(self, hospital_type: str, province_id: str, city_id: str | None = None) -> dict[str, Any]:  # pragma: no cover - interface
        raise NotImplementedError

    async def find_hospitals(self, q: str, hospital_type: str | None = None) -> dict[str, Any]:  # pragma: no cover - interface
        raise NotImplementedError

    async def get_bed_details(self, hospital_type: str, hospital_id: str) -> dict[str, Any]:  # pragma: no cover - interface
        raise NotImplementedError

    async def get_maps(self, hospital_id: str) -> dict[str, Any]:  # pragma: no cover - interface
        raise NotImplementedError

    async def close(self) -> None:
        return None
