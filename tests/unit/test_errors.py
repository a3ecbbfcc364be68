"""Tests for lg_common.errors and lg_common.response."""

from src.lg_common.errors import (
    AppError,
    CacheUnavailableError,
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidationFailure,
    InvalidPatternError,
    InvalidShapeError,
    LoaderError,
)
from src.lg_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1001, message="test"), Exception)


class TestSpecificErrors:
    def test_entity_not_found(self) -> None:
        err = EntityNotFoundError("Team", "abc")
        assert (err.code, err.http_status) == (1001, 404)
        assert "abc" in err.message

    def test_duplicate(self) -> None:
        assert DuplicateEntityError("team").http_status == 409

    def test_cache_errors(self) -> None:
        assert InvalidShapeError("x").http_status == 400
        unavailable = CacheUnavailableError("get", "refused")
        assert (unavailable.code, unavailable.operation) == (2002, "get")
        assert InvalidPatternError("*").code == 2004

    def test_invalidation_failure_carries_context(self) -> None:
        err = InvalidationFailure("team", "abc", "teams:*", "down")
        assert (err.entity_type, err.entity_id, err.pattern) == ("team", "abc", "teams:*")
        assert err.code == 2003

    def test_loader_error(self) -> None:
        assert (LoaderError("x").code, LoaderError("x").http_status) == (9003, 503)


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response({"id": "abc"})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"id": "abc"}
        assert resp.request_id.startswith("req_")

    def test_success_keeps_request_id(self) -> None:
        assert success_response(None, "req_custom").request_id == "req_custom"

    def test_error(self) -> None:
        resp = error_response(1001, "Team not found")
        assert resp.code == 1001
        assert resp.data is None

    def test_serializes(self) -> None:
        dumped = ApiResponse().model_dump()
        assert set(dumped) == {"code", "message", "data", "timestamp", "request_id"}
