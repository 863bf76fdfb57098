"""Endpoints for asking to borrow books and answering those requests."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.application.use_cases import (
    create_request as create_request_uc,
    list_requests as list_requests_uc,
    respond_to_request as respond_to_request_uc,
)
from app.domain.entities import BookRequest
from app.domain.errors import BookExchangeError
from app.infrastructure.realtime import ChangeEventPublisher
from app.interfaces.api.dependencies import get_current_user_id, get_db, get_publisher
from app.interfaces.api.routes_helpers import to_http_exception
from app.interfaces.api.schemas import (
    BookRequestCreate,
    BookRequestListRead,
    BookRequestRead,
    BookRequestRespond,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/requests", tags=["requests"])


def _to_read_model(request: BookRequest) -> BookRequestRead:
    return BookRequestRead.model_validate(request)


@router.get("/", response_model=BookRequestListRead)
def list_my_requests(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> BookRequestListRead:
    """Return the requests the user sent and the ones addressed to them."""

    try:
        partition = list_requests_uc(db, user_id=user_id)
    except BookExchangeError as exc:
        raise to_http_exception(exc) from exc
    return BookRequestListRead(
        sent=[_to_read_model(item) for item in partition.sent],
        received=[_to_read_model(item) for item in partition.received],
    )


@router.post("/", response_model=BookRequestRead, status_code=status.HTTP_201_CREATED)
def create_book_request(
    payload: BookRequestCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    publisher: ChangeEventPublisher = Depends(get_publisher),
) -> BookRequestRead:
    try:
        request = create_request_uc(
            db,
            requester_id=user_id,
            book_id=payload.book_id,
            owner_id=payload.owner_id,
            message=payload.message,
            meeting_location=payload.meeting_location,
            publisher=publisher,
        )
    except BookExchangeError as exc:
        logger.info("Request for book %s by %s refused: %s", payload.book_id, user_id, exc.code)
        raise to_http_exception(exc) from exc
    return _to_read_model(request)


@router.post("/{request_id}/respond", response_model=BookRequestRead)
def respond_to_book_request(
    request_id: str,
    payload: BookRequestRespond,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    publisher: ChangeEventPublisher = Depends(get_publisher),
) -> BookRequestRead:
    """Accept or reject a pending request addressed to the user."""

    try:
        request = respond_to_request_uc(
            db,
            owner_id=user_id,
            request_id=request_id,
            decision=payload.decision,
            response_message=payload.response_message,
            publisher=publisher,
        )
    except BookExchangeError as exc:
        logger.info("Response to request %s by %s refused: %s", request_id, user_id, exc.code)
        raise to_http_exception(exc) from exc
    return _to_read_model(request)
