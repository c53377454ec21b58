from __future__ import annotations

from ..api_clients.base import HOSPITAL_TYPES
from ..errors import ApiError
from ..logging_config import logger

INVALID_TYPE_MESSAGE = "Parameter type is only for `covid` or `noncovid`"
HOSPITALS_REQUIRED_MESSAGE = "`type` and `provinceId` are required in URL parameter."
BED_DETAILS_REQUIRED_MESSAGE = "`type` and `hospitalId` are required"
MAPS_REQUIRED_MESSAGE = "`hospitalId` is required"


def _reject(route: str, message: str) -> ApiError:
    logger.info("request.rejected", route=route, reason=message)
    return ApiError.bad_request(message)


def validate_hospitals_query(q: str | None, hospital_type: str | None, province_id: str | None) -> None:
    if hospital_type and hospital_type not in HOSPITAL_TYPES:
        raise _reject("hospitals", INVALID_TYPE_MESSAGE)
    if q:
        return
    if not hospital_type or not province_id:
        raise _reject("hospitals", HOSPITALS_REQUIRED_MESSAGE)


def validate_bed_details_query(hospital_type: str | None, hospital_id: str | None) -> None:
    if not hospital_type or not hospital_id:
        raise _reject("bedDetails", BED_DETAILS_REQUIRED_MESSAGE)


def validate_maps_query(hospital_id: str | None) -> None:
    if not hospital_id:
        raise _reject("maps", MAPS_REQUIRED_MESSAGE)
