"""HTTP controller layer for read-only availability queries."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from booking_engine.controllers.dependencies import get_availability_service
from booking_engine.domain.constraints import AvailabilityInputError
from booking_engine.services.availability_service import AvailabilityService, PlaceNotFoundError
from booking_engine.utils.logger import get_logger
from booking_engine.utils.time_format import format_date, format_hour_12, format_hour_24


logger = get_logger(__name__)

router = APIRouter(tags=["availability"])

_TIME_PATTERN = r"^\d{1,2}:\d{2}$"
_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class TimeOptionResponse(BaseModel):
    """Dropdown option: 24-hour value plus 12-hour display label."""

    value: str
    label: str


class OperatingWindowResponse(BaseModel):
    start_time: str
    end_time: str


class HourSlotResponse(BaseModel):
    time: str
    status: str


class ReservationResponse(BaseModel):
    start_time: str
    end_time: str


class DayAvailabilityResponse(BaseModel):
    place_id: int = Field(gt=0)
    date: str
    is_closed: bool
    operating_window: Optional[OperatingWindowResponse]
    start_times: list[TimeOptionResponse]
    booking_percentage: int = Field(ge=0, le=100)
    is_unbookable: bool
    slots: list[HourSlotResponse]
    reservations: list[ReservationResponse]


class EndTimesResponse(BaseModel):
    start_time: str
    end_times: list[TimeOptionResponse]


class RangeCheckRequest(BaseModel):
    date: str = Field(pattern=_DATE_PATTERN)
    start_time: str = Field(pattern=_TIME_PATTERN)
    end_time: str = Field(pattern=_TIME_PATTERN)


class RangeCheckResponse(BaseModel):
    available: bool
    reason: str


class CalendarDayResponse(BaseModel):
    date: str
    booking_percentage: int = Field(ge=0, le=100)
    is_unbookable: bool
    is_closed: bool
    is_past: bool


class CalendarResponse(BaseModel):
    place_id: int = Field(gt=0)
    days: list[CalendarDayResponse]


class OpenDatesResponse(BaseModel):
    place_id: int = Field(gt=0)
    dates: list[str]


def _time_option(hour: int) -> TimeOptionResponse:
    return TimeOptionResponse(value=format_hour_24(hour), label=format_hour_12(hour))


@router.get(
    "/places/{place_id}/availability",
    response_model=DayAvailabilityResponse,
    status_code=status.HTTP_200_OK,
)
async def get_day_availability(
    place_id: int,
    date: str = Query(..., pattern=_DATE_PATTERN),
    service: AvailabilityService = Depends(get_availability_service),
) -> DayAvailabilityResponse:
    """Start times, fullness and per-hour statuses for one date."""
    try:
        result = service.get_day_availability(place_id, date)
        return DayAvailabilityResponse(
            place_id=result.place_id,
            date=format_date(result.date),
            is_closed=result.is_closed,
            operating_window=(
                OperatingWindowResponse(
                    start_time=format_hour_24(result.window.start_hour),
                    end_time=format_hour_24(result.window.end_hour),
                )
                if result.window is not None
                else None
            ),
            start_times=[_time_option(hour) for hour in result.start_times],
            booking_percentage=result.booking_percentage,
            is_unbookable=result.is_unbookable,
            slots=[
                HourSlotResponse(time=format_hour_24(slot.hour), status=slot.status.value)
                for slot in result.slots
            ],
            reservations=[
                ReservationResponse(
                    start_time=format_hour_24(reservation.start_hour),
                    end_time=format_hour_24(reservation.end_hour),
                )
                for reservation in result.reservations
            ],
        )
    except AvailabilityInputError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except PlaceNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected day availability failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute availability",
        ) from exc


@router.get(
    "/places/{place_id}/availability/end_times",
    response_model=EndTimesResponse,
    status_code=status.HTTP_200_OK,
)
async def get_end_times(
    place_id: int,
    date: str = Query(..., pattern=_DATE_PATTERN),
    start_time: str = Query(...),
    service: AvailabilityService = Depends(get_availability_service),
) -> EndTimesResponse:
    try:
        end_times = service.get_end_times(place_id, date, start_time)
        return EndTimesResponse(
            start_time=start_time,
            end_times=[_time_option(hour) for hour in end_times],
        )
    except AvailabilityInputError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except PlaceNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected end time enumeration failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute end times",
        ) from exc


@router.post(
    "/places/{place_id}/availability/check",
    response_model=RangeCheckResponse,
    status_code=status.HTTP_200_OK,
)
async def check_range(
    place_id: int,
    payload: RangeCheckRequest,
    service: AvailabilityService = Depends(get_availability_service),
) -> RangeCheckResponse:
    """Re-check one concrete range; the booking store must still commit atomically."""
    try:
        result = service.check_range(
            place_id,
            payload.date,
            payload.start_time,
            payload.end_time,
        )
        return RangeCheckResponse(available=result.available, reason=result.reason)
    except AvailabilityInputError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except PlaceNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected range check failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to check range",
        ) from exc


@router.get(
    "/places/{place_id}/calendar",
    response_model=CalendarResponse,
    status_code=status.HTTP_200_OK,
)
async def get_calendar(
    place_id: int,
    start_date: str = Query(..., pattern=_DATE_PATTERN),
    end_date: str = Query(..., pattern=_DATE_PATTERN),
    service: AvailabilityService = Depends(get_availability_service),
) -> CalendarResponse:
    try:
        days = service.get_calendar(place_id, start_date, end_date)
        return CalendarResponse(
            place_id=place_id,
            days=[
                CalendarDayResponse(
                    date=format_date(day.date),
                    booking_percentage=day.booking_percentage,
                    is_unbookable=day.is_unbookable,
                    is_closed=day.is_closed,
                    is_past=day.is_past,
                )
                for day in days
            ],
        )
    except AvailabilityInputError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except PlaceNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected calendar failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute calendar",
        ) from exc


@router.get(
    "/places/{place_id}/open_dates",
    response_model=OpenDatesResponse,
    status_code=status.HTTP_200_OK,
)
async def get_open_dates(
    place_id: int,
    start_date: Optional[str] = Query(default=None, pattern=_DATE_PATTERN),
    end_date: Optional[str] = Query(default=None, pattern=_DATE_PATTERN),
    service: AvailabilityService = Depends(get_availability_service),
) -> OpenDatesResponse:
    try:
        dates = service.list_open_dates(place_id, start_date, end_date)
        return OpenDatesResponse(
            place_id=place_id,
            dates=[format_date(value) for value in dates],
        )
    except AvailabilityInputError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except PlaceNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except Exception as exc:
        logger.exception("Unexpected open dates failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list open dates",
        ) from exc
