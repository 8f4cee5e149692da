"""Appointment validation and booking endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ..domain import schemas
from ..services.scheduling import SchedulingService
from .deps import get_service

router = APIRouter(tags=["appointments"])


@router.post("/validate/appointment", response_model=schemas.ValidationResult)
def validate_appointment(
    body: schemas.AppointmentIn,
    service: SchedulingService = Depends(get_service),
) -> schemas.ValidationResult:
    """Check a candidate without saving it."""
    result = service.validate(body.to_domain())
    return schemas.ValidationResult.from_domain(result)


@router.post(
    "/appointments",
    response_model=schemas.AppointmentCreated,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": schemas.ValidationResult}},
)
def create_appointment(
    body: schemas.AppointmentCreate,
    service: SchedulingService = Depends(get_service),
) -> schemas.AppointmentCreated:
    """Book a candidate; refusals come back as 409 with the validation result."""
    booking = service.create(
        body.to_domain(), override_travel_warning=body.override_travel_warning
    )
    return schemas.AppointmentCreated.from_booking(booking)


@router.get("/appointments/{appointment_id}", response_model=schemas.Appointment)
def get_appointment(
    appointment_id: str,
    owner: str = Query(..., min_length=1),
    service: SchedulingService = Depends(get_service),
) -> schemas.Appointment:
    appt = service.get(owner, appointment_id)
    if appt is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found")
    return schemas.Appointment.from_domain(appt)


@router.delete("/appointments/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_appointment(
    appointment_id: str,
    owner: str = Query(..., min_length=1),
    service: SchedulingService = Depends(get_service),
) -> Response:
    """Remove an appointment. Moving it to another owner is delete plus create."""
    if not service.cancel(owner, appointment_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
