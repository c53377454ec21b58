from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..errors import ProviderError

MOCK_DATA_FILE = Path(__file__).resolve().parents[1] / "mocks" / "carirs.jsonl"
GMAPS_URL = "https://www.google.com/maps/search/?api=1&query={lat},{long}"


def _matches(value: str | None, q: str | None) -> bool:
    if not q:
        return True
    return q.strip().lower() in (value or "").lower()


class MockDataset:
    """Bundled provinces, cities, hospitals and bed details, loaded once."""

    def __init__(self, path: Path = MOCK_DATA_FILE) -> None:
        self.path = path
        self._records: dict[str, list[dict[str, Any]]] | None = None

    def records(self, kind: str) -> list[dict[str, Any]]:
        if self._records is None:
            self._records = self._load()
        return self._records.get(kind, [])

    def _load(self) -> dict[str, list[dict[str, Any]]]:
        if not self.path.exists():
            raise ProviderError(f"Mock data file missing: {self.path}")
        grouped: dict[str, list[dict[str, Any]]] = {}
        with self.path.open("r", encoding="utf-8") as handle:
            for line in handle:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                try:
                    data = json.loads(line)
                except json.JSONDecodeError:
                    continue
                kind = data.pop("kind", None)
                if kind:
                    grouped.setdefault(kind, []).append(data)
        return grouped

    def provinces(self, q: str | None = None) -> dict[str, Any]:
        items = [
            {"id": row["id"], "name": row["name"]}
            for row in self.records("province")
            if _matches(row["name"], q)
        ]
        return {"provinces": items}

    def cities(self, province_id: str | None = None, q: str | None = None) -> dict[str, Any]:
        items = [
            {"id": row["id"], "name": row["name"]}
            for row in self.records("city")
            if (province_id is None or row["province_id"] == province_id) and _matches(row["name"], q)
        ]
        return {"cities": items}

    def _hospital(self, hospital_id: str) -> dict[str, Any] | None:
        for row in self.records("hospital"):
            if row["id"] == hospital_id:
                return row
        return None

    def hospitals(self, hospital_type: str, province_id: str, city_id: str | None = None) -> dict[str, Any]:
        items: list[dict[str, Any]] = []
        for row in self.records("hospital"):
            beds = row.get("beds", {}).get(hospital_type)
            if beds is None or row["province_id"] != province_id:
                continue
            if city_id and row["city_id"] != city_id:
                continue
            items.append(
                {
                    "id": row["id"],
                    "name": row["name"],
                    "address": row["address"],
                    "phone": row["phone"],
                    "queue": beds.get("queue", 0),
                    "bed_availability": beds.get("available", 0),
                    "updated_at": row.get("updated_at"),
                }
            )
        return {"hospitals": items}

    def search_hospitals(self, q: str, hospital_type: str | None = None) -> dict[str, Any]:
        items = [
            {
                "id": row["id"],
                "name": row["name"],
                "address": row["address"],
                "phone": row["phone"],
                "province_id": row["province_id"],
                "city_id": row["city_id"],
            }
            for row in self.records("hospital")
            if (_matches(row["name"], q) or _matches(row["address"], q))
            and (hospital_type is None or hospital_type in row.get("beds", {}))
        ]
        return {"hospitals": items}

    def bed_details(self, hospital_type: str, hospital_id: str) -> dict[str, Any]:
        hospital = self._hospital(hospital_id)
        if hospital is None:
            return {"data": None}
        rooms: list[dict[str, Any]] = []
        for row in self.records("bed_detail"):
            if row["hospital_id"] == hospital_id and row["type"] == hospital_type:
                rooms = row["rooms"]
                break
        return {
            "data": {
                "id": hospital["id"],
                "name": hospital["name"],
                "address": hospital["address"],
                "phone": hospital["phone"],
                "type": hospital_type,
                "bed_detail": rooms,
            }
        }

    def maps(self, hospital_id: str) -> dict[str, Any]:
        hospital = self._hospital(hospital_id)
        if hospital is None:
            return {"data": None}
        return {
            "data": {
                "id": hospital["id"],
                "name": hospital["name"],
                "address": hospital["address"],
                "lat": hospital["lat"],
                "long": hospital["long"],
                "gmaps": GMAPS_URL.format(lat=hospital["lat"], long=hospital["long"]),
            }
        }
