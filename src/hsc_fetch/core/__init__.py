"""Core request pipeline for hsc-fetch.

Token state, single-flight refresh, single-attempt execution, retry
policy and the logical-call state machine that ties them together.
"""

from __future__ import annotations

from .errors import ErrorFactory
from .pipeline import RequestPipeline
from .request_executor import AttemptOutcome, OutcomeKind, RequestExecutor
from .retry_policy import CallState, RetryPolicy
from .token_manager import RefreshCoordinator, TokenStore

__all__ = [
    "AttemptOutcome",
    "CallState",
    "ErrorFactory",
    "OutcomeKind",
    "RefreshCoordinator",
    "RequestExecutor",
    "RequestPipeline",
    "RetryPolicy",
    "TokenStore",
]
