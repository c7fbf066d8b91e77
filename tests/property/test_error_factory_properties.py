"""Property tests for ErrorFactory.

Every failed outcome maps to exactly one library error with a stable
code, the original status and a correlation ID.
"""

from __future__ import annotations

import httpx
from hypothesis import given, settings, strategies as st

from hsc_fetch.core.errors import ErrorFactory
from hsc_fetch.core.request_executor import AttemptOutcome, classify_status
from hsc_fetch.errors import (
    AuthenticationError,
    ClientError,
    FetchError,
    ServerError,
)

error_statuses = st.integers(min_value=400, max_value=599)
correlation_ids = st.uuids().map(str)
bodies = st.one_of(
    st.none(),
    st.text(max_size=50),
    st.dictionaries(st.text(max_size=10), st.integers(), max_size=3),
)


class TestErrorFactoryProperties:
    """Property tests for ErrorFactory.from_outcome."""

    @given(status_code=error_statuses, correlation_id=correlation_ids, body=bodies)
    @settings(max_examples=200)
    def test_status_maps_to_error_class(
        self,
        status_code: int,
        correlation_id: str,
        body: object,
    ) -> None:
        outcome = AttemptOutcome(
            classify_status(status_code),
            data=body,
            status_code=status_code,
            response=httpx.Response(status_code),
        )

        error = ErrorFactory.from_outcome(outcome, attempts=2, correlation_id=correlation_id)

        if status_code == 401:
            assert isinstance(error, AuthenticationError)
        elif status_code >= 500:
            assert isinstance(error, ServerError)
        else:
            assert isinstance(error, ClientError)
        assert error.status_code == status_code
        assert error.correlation_id == correlation_id
        assert error.details == {"body": body, "attempts": 2}
        assert str(error).startswith(f"Request failed with status {status_code}")

    @given(status_code=error_statuses)
    def test_correlation_id_always_present(self, status_code: int) -> None:
        outcome = AttemptOutcome(classify_status(status_code), status_code=status_code)

        error = ErrorFactory.from_outcome(outcome)

        assert isinstance(error, FetchError)
        assert error.correlation_id

    @given(message=st.text(min_size=1, max_size=50))
    def test_library_errors_pass_through(self, message: str) -> None:
        original = ClientError(message, status_code=418)

        assert ErrorFactory.from_exception(original) is original
