"""Client-side cache of the requests the current user sent and received."""

from __future__ import annotations

from app.application.ports import ExchangeBackend, IdentityProvider
from app.domain.entities import BookRequest, ChangeEvent, RequestPartition
from app.domain.errors import (
    DuplicateRequestError,
    InvalidOperationError,
    InvalidStateTransitionError,
    UnauthorizedError,
    ensure_authenticated,
)

from .observable import ObservableStore
from .reducers import Fetched, RemoteChange, RequestState, WriteConfirmed, reduce_requests


class RequestStore(ObservableStore[RequestState]):
    """Mediate reads and writes of book requests for one user.

    Cached data allows failing fast on requests that can never succeed; the
    remote store still decides every write.
    """

    def __init__(self, backend: ExchangeBackend, identity: IdentityProvider) -> None:
        super().__init__(RequestState(), reduce_requests)
        self._backend = backend
        self._identity = identity

    @property
    def sent(self) -> list[BookRequest]:
        return self.list_mine().sent

    @property
    def received(self) -> list[BookRequest]:
        return self.list_mine().received

    def list_mine(self) -> RequestPartition:
        return self.state.partition(self._identity())

    async def refresh(self) -> RequestPartition:
        user_id = ensure_authenticated(self._identity())
        partition = await self._backend.list_requests(user_id)
        self._dispatch(Fetched(tuple(partition.sent) + tuple(partition.received)))
        return self.list_mine()

    async def create_request(
        self,
        book_id: str,
        owner_id: str,
        message: str,
        meeting_location: str | None = None,
    ) -> BookRequest:
        user_id = ensure_authenticated(self._identity())
        if owner_id == user_id:
            raise InvalidOperationError("You cannot request your own book")
        if self.state.pending_for(book_id=book_id, requester_id=user_id) is not None:
            raise DuplicateRequestError()

        saved = await self._backend.create_request(
            requester_id=user_id,
            book_id=book_id,
            owner_id=owner_id,
            message=message,
            meeting_location=meeting_location,
        )
        self._dispatch(WriteConfirmed((saved,)))
        return self.state.get(saved.id) or saved

    async def respond_to_request(
        self,
        request_id: str,
        decision: str,
        response_message: str | None = None,
    ) -> BookRequest:
        user_id = ensure_authenticated(self._identity())
        cached = self.state.get(request_id)
        if cached is not None:
            if cached.owner_id != user_id:
                raise UnauthorizedError("Only the owner of the book can answer this request")
            if not cached.is_pending:
                raise InvalidStateTransitionError(f"This request was already {cached.status}")

        updated = await self._backend.respond_to_request(
            owner_id=user_id,
            request_id=request_id,
            decision=decision,
            response_message=response_message,
        )
        self._dispatch(WriteConfirmed((updated,)))
        return self.state.get(updated.id) or updated

    def apply_change(self, event: ChangeEvent) -> bool:
        return self._dispatch(RemoteChange(event))


__all__ = ["RequestStore"]
