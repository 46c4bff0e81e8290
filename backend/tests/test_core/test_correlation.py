"""Tests for correlation IDs in the request context and domain exceptions."""

import re

import pytest

from core.correlation import (
    correlation_id_var,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from core.logging_config import correlation_filter
from models.exceptions import (
    AccessDeniedException,
    DomainException,
    EntryNotFoundException,
    SelfModerationException,
    UserBannedException,
)


class TestCorrelationContext:
    def setup_method(self) -> None:
        set_correlation_id("")

    def test_generated_ids_are_short_hex(self) -> None:
        assert re.match(r"^[0-9a-f]{8}$", generate_correlation_id())

    def test_generated_ids_are_unique(self) -> None:
        assert len({generate_correlation_id() for _ in range(500)}) == 500

    def test_set_and_get(self) -> None:
        set_correlation_id("abc12345")
        assert get_correlation_id() == "abc12345"

    def test_empty_outside_request(self) -> None:
        correlation_id_var.set("")
        assert get_correlation_id() == ""


class TestCorrelationFilter:
    def setup_method(self) -> None:
        set_correlation_id("")

    def test_binds_current_id(self) -> None:
        set_correlation_id("req00001")
        record: dict = {"extra": {}}

        assert correlation_filter(record) is True  # type: ignore[arg-type]
        assert record["extra"]["correlation_id"] == "req00001"

    def test_placeholder_without_request(self) -> None:
        record: dict = {"extra": {}}
        correlation_filter(record)  # type: ignore[arg-type]
        assert record["extra"]["correlation_id"] == "-"


class TestExceptionCorrelation:
    def setup_method(self) -> None:
        set_correlation_id("")

    def test_uses_request_id(self) -> None:
        set_correlation_id("context1")
        assert DomainException("boom").correlation_id == "context1"

    def test_explicit_id_wins(self) -> None:
        set_correlation_id("context1")
        exc = DomainException("boom", correlation_id="explicit")
        assert exc.correlation_id == "explicit"

    @pytest.mark.parametrize(
        "factory",
        [
            lambda: EntryNotFoundException("e1"),
            lambda: AccessDeniedException(),
            lambda: SelfModerationException("ban"),
            lambda: UserBannedException("spam"),
        ],
    )
    def test_generated_when_no_request(self, factory) -> None:
        assert len(factory().correlation_id) == 8

    def test_permanent_ban_message(self) -> None:
        exc = UserBannedException("spam")

        assert exc.reason == "spam"
        assert exc.expires_at is None
        assert "permanently" in exc.message
