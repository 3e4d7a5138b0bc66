# backend/tests/unit/test_base_service.py
"""
Unit tests for BaseService plumbing.

These tests isolate transaction, metrics and logging handling from the database
using mocks.
"""

import logging
from unittest.mock import Mock, patch

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tutorhub.core.exceptions import (
    NotFoundException,
    RepositoryException,
    ServiceException,
)
from tutorhub.services.base import BaseService

pytestmark = pytest.mark.unit


class _TimedService(BaseService):
    @BaseService.measure_operation("timed")
    def run(self, value):
        if isinstance(value, Exception):
            raise value
        return value


class TestTransactionManagement:
    def test_commit_on_success(self):
        mock_db = Mock(spec=Session)
        service = BaseService(mock_db)

        with service.transaction() as session:
            assert session is mock_db

        mock_db.commit.assert_called_once()
        mock_db.rollback.assert_not_called()

    def test_sqlalchemy_error_becomes_service_exception(self):
        mock_db = Mock(spec=Session)
        service = BaseService(mock_db)

        with pytest.raises(ServiceException) as exc_info:
            with service.transaction():
                raise SQLAlchemyError("Database connection lost")

        mock_db.rollback.assert_called_once()
        mock_db.commit.assert_not_called()
        assert "Database operation failed" in exc_info.value.message

    def test_repository_error_becomes_service_exception(self):
        mock_db = Mock(spec=Session)
        service = BaseService(mock_db)

        with pytest.raises(ServiceException):
            with service.transaction():
                raise RepositoryException("Failed to create ClassSession")

        mock_db.rollback.assert_called_once()

    def test_domain_error_propagates_unchanged(self):
        mock_db = Mock(spec=Session)
        service = BaseService(mock_db)

        with pytest.raises(NotFoundException):
            with service.transaction():
                raise NotFoundException("Session not found")

        mock_db.rollback.assert_called_once()
        mock_db.commit.assert_not_called()


class TestMeasureOperation:
    def test_returns_result_and_reports_success(self):
        service = _TimedService(Mock(spec=Session))

        with patch("tutorhub.services.base.prometheus_metrics") as mock_metrics:
            assert service.run(42) == 42

        kwargs = mock_metrics.record_service_operation.call_args.kwargs
        assert kwargs["status"] == "success"
        assert kwargs["error_type"] is None

    def test_reports_to_prometheus(self):
        service = _TimedService(Mock(spec=Session))

        with patch("tutorhub.services.base.prometheus_metrics") as mock_metrics:
            with pytest.raises(KeyError):
                service.run(KeyError("missing"))

        kwargs = mock_metrics.record_service_operation.call_args.kwargs
        assert kwargs["service"] == "_TimedService"
        assert kwargs["operation"] == "timed"
        assert kwargs["status"] == "error"
        assert kwargs["error_type"] == "KeyError"

    def test_wrapper_keeps_operation_name(self):
        assert _TimedService.run._operation_name == "timed"
        assert _TimedService.run.__name__ == "run"


class TestLogOperation:
    def test_context_is_nested_under_one_key(self, caplog):
        service = BaseService(Mock(spec=Session))

        with caplog.at_level(logging.INFO):
            service.log_operation("fan_out_bookings", course_id="c1", bookings_created=3)

        [record] = [r for r in caplog.records if r.getMessage() == "Operation: fan_out_bookings"]
        assert record.operation == "fan_out_bookings"
        assert record.context == {"course_id": "c1", "bookings_created": 3}

    @pytest.mark.parametrize("key", ["created", "name", "message", "module"])
    def test_logrecord_attribute_names_are_safe(self, caplog, key):
        service = BaseService(Mock(spec=Session))

        with caplog.at_level(logging.INFO):
            service.log_operation("any_operation", **{key: "value"})

        [record] = [r for r in caplog.records if r.getMessage() == "Operation: any_operation"]
        assert record.context == {key: "value"}
