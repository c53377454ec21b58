from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query, Response

from ..api_clients.base import HospitalProvider
from ..cache import CacheProvider, CacheResult, build_cache_key, get_from_cache_first
from ..config import Settings
from ..dependencies import get_app_settings, get_cache, get_provider
from ..errors import ProviderError
from ..utils.validation import validate_bed_details_query, validate_hospitals_query, validate_maps_query
from .meta import API_PREFIX

router = APIRouter(prefix=API_PREFIX, tags=["lookup"])

STATIC_DATA_INFO = (
    "The data is static and not returned the total and available rooms, "
    "use parameters `provinceId` and `cityId` to view the real-time data."
)


def _send(response: Response, result: CacheResult) -> Any:
    response.headers["X-Cache-Hit"] = "1" if result.hit else "0"
    return result.value


def _with_info(payload: Any) -> Dict[str, Any]:
    if isinstance(payload, dict):
        return {"info": STATIC_DATA_INFO, **payload}
    return {"info": STATIC_DATA_INFO, "data": payload}


@router.get("/provinces")
async def provinces(
    response: Response,
    q: str | None = Query(default=None),
    provider: HospitalProvider = Depends(get_provider),
    cache: CacheProvider = Depends(get_cache),
    settings: Settings = Depends(get_app_settings),
) -> Any:
    key = build_cache_key(settings.cache_prefix, "provinces", q)
    if q:
        result = await get_from_cache_first(cache, key, lambda: provider.find_provinces(q), settings.static_ttl_seconds)
    else:
        result = await get_from_cache_first(cache, key, provider.get_provinces, settings.static_ttl_seconds)
    return _send(response, result)


@router.get("/cities")
async def cities(
    response: Response,
    q: str | None = Query(default=None),
    province_id: str | None = Query(default=None, alias="provinceId"),
    provider: HospitalProvider = Depends(get_provider),
    cache: CacheProvider = Depends(get_cache),
    settings: Settings = Depends(get_app_settings),
) -> Any:
    if province_id:
        key = build_cache_key(settings.cache_prefix, "cities", province_id, None)
        result = await get_from_cache_first(cache, key, lambda: provider.get_cities(province_id), settings.static_ttl_seconds)
    else:
        key = build_cache_key(settings.cache_prefix, "cities", None, q)
        result = await get_from_cache_first(cache, key, lambda: provider.find_cities(q or None), settings.static_ttl_seconds)
    return _send(response, result)


@router.get("/hospitals")
async def hospitals(
    response: Response,
    q: str | None = Query(default=None),
    hospital_type: str | None = Query(default=None, alias="type"),
    province_id: str | None = Query(default=None, alias="provinceId"),
    city_id: str | None = Query(default=None, alias="cityId"),
    provider: HospitalProvider = Depends(get_provider),
    cache: CacheProvider = Depends(get_cache),
    settings: Settings = Depends(get_app_settings),
) -> Any:
    validate_hospitals_query(q, hospital_type, province_id)
    try:
        if q:
            key = build_cache_key(settings.cache_prefix, "hospitals.search", q, hospital_type)
            result = await get_from_cache_first(
                cache,
                key,
                lambda: provider.find_hospitals(q, hospital_type or None),
                settings.realtime_ttl_seconds,
            )
            return _with_info(_send(response, result))
        key = build_cache_key(settings.cache_prefix, "hospitals", hospital_type, province_id, city_id)
        result = await get_from_cache_first(
            cache,
            key,
            lambda: provider.get_hospitals(hospital_type, province_id, city_id or None),
            settings.realtime_ttl_seconds,
        )
    except ProviderError as exc:
        api_error = exc.to_api_error()
        if api_error is None:
            raise
        raise api_error from exc
    return _send(response, result)


@router.get("/bedDetails")
async def bed_details(
    response: Response,
    hospital_type: str | None = Query(default=None, alias="type"),
    hospital_id: str | None = Query(default=None, alias="hospitalId"),
    provider: HospitalProvider = Depends(get_provider),
    cache: CacheProvider = Depends(get_cache),
    settings: Settings = Depends(get_app_settings),
) -> Any:
    validate_bed_details_query(hospital_type, hospital_id)
    key = build_cache_key(settings.cache_prefix, "bedDetails", hospital_type, hospital_id)
    result = await get_from_cache_first(
        cache,
        key,
        lambda: provider.get_bed_details(hospital_type, hospital_id),
        settings.realtime_ttl_seconds,
    )
    return _send(response, result)


@router.get("/maps")
async def maps(
    response: Response,
    hospital_id: str | None = Query(default=None, alias="hospitalId"),
    provider: HospitalProvider = Depends(get_provider),
    cache: CacheProvider = Depends(get_cache),
    settings: Settings = Depends(get_app_settings),
) -> Any:
    validate_maps_query(hospital_id)
    key = build_cache_key(settings.cache_prefix, "maps", hospital_id)
    result = await get_from_cache_first(cache, key, lambda: provider.get_maps(hospital_id), settings.static_ttl_seconds)
    return _send(response, result)
