# backend/tutorhub/repositories/session_request_repository.py
"""
Session Request Repositories for the scheduling core.

Reschedule and add-session requests share the same review lifecycle, so both
repositories are built on one small mixin for the tutor/admin listings.
"""

import logging
from typing import List, Optional, Type, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.session_request import AddSessionRequest, RequestStatus, RescheduleRequest
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class _ReviewQueueMixin:
    """Listing queries common to both request tables."""

    db: Session
    model: Type
    logger: logging.Logger

    def get_for_tutor(self, tutor_id: str) -> List:
        """Requests submitted by a tutor, newest first."""
        try:
            return (
                self._listing_query()
                .filter(self.model.requested_by_tutor_id == tutor_id)
                .order_by(self.model.created_at.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing requests for tutor {tutor_id}: {str(e)}")
            raise RepositoryException(f"Failed to list requests: {str(e)}")

    def get_pending(self) -> List:
        """PENDING requests, oldest first."""
        try:
            return (
                self._listing_query()
                .filter(self.model.status == RequestStatus.PENDING)
                .order_by(self.model.created_at.asc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing pending requests: {str(e)}")
            raise RepositoryException(f"Failed to list pending requests: {str(e)}")

    def get_pending_by_id(self, request_id: str) -> Optional[object]:
        """A request by id only while it is still PENDING, row locked."""
        try:
            return (
                self.db.query(self.model)
                .filter(
                    self.model.id == request_id,
                    self.model.status == RequestStatus.PENDING,
                )
                .with_for_update()
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting pending request {request_id}: {str(e)}")
            raise RepositoryException(f"Failed to get request: {str(e)}")

    def _listing_query(self):
        return self.db.query(self.model)


class RescheduleRequestRepository(_ReviewQueueMixin, BaseRepository[RescheduleRequest]):
    """Repository for reschedule requests."""

    def __init__(self, db: Session):
        super().__init__(db, RescheduleRequest)
        self.logger = logging.getLogger(__name__)

    def _listing_query(self):
        return self.db.query(RescheduleRequest).options(joinedload(RescheduleRequest.session))

    def get_pending_request(self, request_id: str) -> Optional[RescheduleRequest]:
        return cast(Optional[RescheduleRequest], self.get_pending_by_id(request_id))


class AddSessionRequestRepository(_ReviewQueueMixin, BaseRepository[AddSessionRequest]):
    """Repository for add-session requests."""

    def __init__(self, db: Session):
        super().__init__(db, AddSessionRequest)
        self.logger = logging.getLogger(__name__)

    def _listing_query(self):
        return self.db.query(AddSessionRequest).options(joinedload(AddSessionRequest.course))

    def get_pending_request(self, request_id: str) -> Optional[AddSessionRequest]:
        return cast(Optional[AddSessionRequest], self.get_pending_by_id(request_id))
