"""Use case for listing the requests a user sent and received."""

from dataclasses import replace

from sqlalchemy.orm import Session

from app.application.use_cases.display_names import resolve_book_titles, resolve_user_names
from app.domain.entities import BookRequest, RequestPartition
from app.domain.errors import ensure_authenticated
from app.infrastructure.repositories import BookRequestRepository


def list_requests(session: Session, *, user_id: str | None) -> RequestPartition:
    """Return the requests of ``user_id`` split by role, newest first.

    Book titles and user names are attached when available; lookup failures
    fall back to placeholders instead of failing the listing.
    """

    user_id = ensure_authenticated(user_id)
    repository = BookRequestRepository(session)
    sent = list(repository.list_for_requester(user_id))
    received = list(repository.list_for_owner(user_id))

    everything = sent + received
    names = resolve_user_names(
        session,
        [request.requester_id for request in everything]
        + [request.owner_id for request in everything],
    )
    titles = resolve_book_titles(session, [request.book_id for request in everything])

    def _decorate(request: BookRequest) -> BookRequest:
        return replace(
            request,
            book_title=titles.get(request.book_id),
            requester_name=names.get(request.requester_id),
            owner_name=names.get(request.owner_id),
        )

    return RequestPartition(
        sent=[_decorate(request) for request in sent],
        received=[_decorate(request) for request in received],
    )


__all__ = ["list_requests"]
