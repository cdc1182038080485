"""Guest service requests ("call waiter") and the staff queue."""

import logging
import uuid

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.api.deps import get_caller, get_db, get_notifier, get_property_or_404
from zamora.auth.policy import Action, Caller, authorize
from zamora.errors import NotFoundError
from zamora.models.service_request import ServiceRequest
from zamora.notifications.notifier import Notifier, render
from zamora.schemas.service_request import (
    ServiceRequestCreate,
    ServiceRequestListResponse,
    ServiceRequestResponse,
)
from zamora.services.status import SERVICE_REQUEST_TRANSITIONS, ServiceRequestStatus, ensure_transition

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/mobile/service-requests", tags=["service-requests"])


@router.post("", response_model=ServiceRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_service_request(
    body: ServiceRequestCreate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
) -> ServiceRequestResponse:
    """Raised by guests from the table or room QR page; no login needed."""
    prop = await get_property_or_404(db, body.property_id)

    request = ServiceRequest(**body.model_dump(), status=ServiceRequestStatus.PENDING)
    db.add(request)
    await db.flush()
    logger.info("Service request %s (%s) at property %s", request.id, request.type, prop.id)

    location = f"Table {request.table_number}" if request.table_number else f"Room {request.room_number}"
    message = render("service_request", request_type=request.type.replace("_", " "), location=location)
    background_tasks.add_task(
        notifier.push_to_property,
        prop.id,
        {"title": "Service Request", "body": message, "url": "/dashboard/service-requests"},
    )
    return ServiceRequestResponse.model_validate(request)


@router.get("/active/{property_id}", response_model=ServiceRequestListResponse)
async def list_active_requests(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> ServiceRequestListResponse:
    """Pending requests, oldest first."""
    authorize(caller, Action.SERVICE_REQUESTS_HANDLE, property_id)
    result = await db.execute(
        select(ServiceRequest)
        .where(
            ServiceRequest.property_id == property_id,
            ServiceRequest.status == ServiceRequestStatus.PENDING,
        )
        .order_by(ServiceRequest.created_at.asc())
    )
    requests = list(result.scalars().all())
    return ServiceRequestListResponse(
        requests=[ServiceRequestResponse.model_validate(r) for r in requests],
        count=len(requests),
    )


@router.post("/{request_id}/resolve", response_model=ServiceRequestResponse)
async def resolve_request(
    request_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> ServiceRequestResponse:
    request = await db.get(ServiceRequest, request_id)
    if request is None:
        raise NotFoundError("Service request not found")
    authorize(caller, Action.SERVICE_REQUESTS_HANDLE, request.property_id)

    if ensure_transition(
        SERVICE_REQUEST_TRANSITIONS, request.status, ServiceRequestStatus.RESOLVED, entity="service request"
    ):
        request.status = ServiceRequestStatus.RESOLVED
        request.resolved_by = caller.id
        await db.flush()
    return ServiceRequestResponse.model_validate(request)
