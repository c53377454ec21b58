from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter

from ..models.schemas import Pong, RouteDoc

router = APIRouter(tags=["meta"])

API_PREFIX = "/api/v1"

ROUTE_DOCS: Dict[str, RouteDoc] = {
    "/ping": RouteDoc(method="get", details="health checker"),
    f"{API_PREFIX}/provinces": RouteDoc(
        method="get",
        details="get list of provinces",
        query=[{"q": "optional"}],
        examples=[f"{API_PREFIX}/provinces?q=jakarta"],
    ),
    f"{API_PREFIX}/cities": RouteDoc(
        method="get",
        details="get list of cities",
        query=[{"q": "optional", "provinceId": "optional"}],
        examples=[
            f"{API_PREFIX}/cities?q=jakarta%20pusat",
            f"{API_PREFIX}/cities?provinceId=31prop",
        ],
    ),
    f"{API_PREFIX}/hospitals": RouteDoc(
        method="get",
        details="get list of hospitals",
        query=[
            {
                "q": "required if no `provinceId`",
                "type": "required if no `q`",
                "provinceId": "required if no `q`",
                "cityId": "optional",
            }
        ],
        examples=[
            f"{API_PREFIX}/hospitals?q=rsup%20fatmawati",
            f"{API_PREFIX}/hospitals?q=jagakarsa&type=covid",
            f"{API_PREFIX}/hospitals?type=noncovid&provinceId=31prop",
            f"{API_PREFIX}/hospitals?type=covid&provinceId=31prop&cityId=3171",
        ],
    ),
    f"{API_PREFIX}/bedDetails": RouteDoc(
        method="get",
        details="get list of bed details",
        query=[{"type": "required", "hospitalId": "required"}],
        examples=[f"{API_PREFIX}/bedDetails?type=covid&hospitalId=3171793"],
    ),
    f"{API_PREFIX}/maps": RouteDoc(
        method="get",
        details="get maps of hospital",
        query=[{"hospitalId": "required"}],
        examples=[f"{API_PREFIX}/maps?hospitalId=3171793"],
    ),
}


@router.get("/")
async def index() -> Dict[str, Any]:
    return {path: doc.render() for path, doc in ROUTE_DOCS.items()}


@router.get("/ping", response_model=Pong)
async def ping() -> Pong:
    return Pong()
