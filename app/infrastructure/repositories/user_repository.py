"""Persistence layer for user profiles."""

from __future__ import annotations

from typing import Iterable

from sqlalchemy.orm import Session

from app.domain.entities import UserProfile
from app.infrastructure.models import UserModel


class UserRepository:
    """Read and register public user profiles."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_map_by_ids(self, user_ids: Iterable[str]) -> dict[str, UserProfile]:
        ids = {user_id for user_id in user_ids if user_id}
        if not ids:
            return {}
        models = self.session.query(UserModel).filter(UserModel.id.in_(ids)).all()
        return {model.id: self._to_entity(model) for model in models}

    def create(self, profile: UserProfile) -> UserProfile:
        model = UserModel(display_name=profile.display_name, email=profile.email)
        if profile.id:
            model.id = profile.id
        self.session.add(model)
        self.session.commit()
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserModel) -> UserProfile:
        return UserProfile(id=model.id, display_name=model.display_name, email=model.email)


__all__ = ["UserRepository"]
