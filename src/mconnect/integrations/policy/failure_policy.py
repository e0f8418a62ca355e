"""
Per-operation failure policy.

Every domain-service operation declares what happens when the Request Client
raises (or the payload cannot be normalized):

- ABSORB: reads favour availability. The failure is logged and a fallback value
  (None, [], zeroed stats) is returned. Selected HTTP statuses can still be
  escalated with `propagate_statuses`.
- REPORT: writes that hand back an OperationResult. The call never raises;
  `success` is False and `message` carries the best available reason.
- PROPAGATE: writes favour visibility. OperationFailed is raised with a
  non-empty, user-presentable message.

Message preference for REPORT/PROPAGATE: backend-supplied message, then the
operation's generic fallback.
"""

from __future__ import annotations

import functools
import inspect
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Sequence, TypeVar

from mconnect.integrations.contracts.marketplace import OperationResult
from mconnect.integrations.errors import HttpError, OperationFailed
from mconnect.integrations.policy.response_wrappers import MESSAGE_FIRST, backend_message, is_rejection

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


class FailurePolicy(str, Enum):
    ABSORB = "absorb"
    REPORT = "report"
    PROPAGATE = "propagate"


def describe_failure(exc: BaseException, fallback: str, message_keys: Sequence[str] = MESSAGE_FIRST) -> str:
    """Human-readable reason for a failed call."""
    if isinstance(exc, OperationFailed):
        return exc.message or fallback
    if isinstance(exc, HttpError):
        return backend_message(exc.payload, exc.backend_message or fallback, message_keys)
    return fallback


def failure_policy(
    policy: FailurePolicy,
    *,
    message: str = "The request could not be completed",
    fallback: Any = None,
    propagate_statuses: Optional[Mapping[int, str]] = None,
    message_keys: Sequence[str] = MESSAGE_FIRST,
) -> Callable[[F], F]:
    """
    Attach a failure policy to an async operation.

    `fallback` is the ABSORB value; pass a callable (e.g. `list`) to get a fresh
    value per call. `propagate_statuses` maps HTTP statuses that must escape an
    ABSORB operation to the message they are raised with. `message_keys` is the
    order in which backend message fields are preferred.
    """
    escalate: Dict[int, str] = dict(propagate_statuses or {})

    def decorator(func: F) -> F:
        operation = func.__qualname__

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except Exception as exc:
                if policy is FailurePolicy.ABSORB:
                    if isinstance(exc, HttpError) and exc.status in escalate:
                        logger.error("%s rejected with status %s", operation, exc.status)
                        raise OperationFailed(escalate[exc.status], status=exc.status, cause=exc) from exc
                    logger.error("%s failed, returning fallback: %s", operation, exc)
                    return fallback() if callable(fallback) else fallback

                reason = describe_failure(exc, message, message_keys)
                status = getattr(exc, "status", None)
                if policy is FailurePolicy.REPORT:
                    logger.error("%s failed: %s", operation, reason)
                    return OperationResult(success=False, message=reason)

                logger.error("%s failed: %s", operation, reason)
                if isinstance(exc, OperationFailed):
                    raise
                raise OperationFailed(reason, status=status, cause=exc, payload=getattr(exc, "payload", None)) from exc

        wrapper.failure_policy = policy  # type: ignore[attr-defined]
        return wrapper  # type: ignore[return-value]

    return decorator


def declared_policies(service: Any) -> Dict[str, FailurePolicy]:
    """Map each public operation of a service to its declared failure policy."""
    policies: Dict[str, FailurePolicy] = {}
    for name, member in inspect.getmembers(service):
        if name.startswith("_"):
            continue
        policy = getattr(member, "failure_policy", None)
        if isinstance(policy, FailurePolicy):
            policies[name] = policy
    return policies


def raise_if_rejected(body: Any, fallback: str, message_keys: Sequence[str] = MESSAGE_FIRST) -> None:
    """A 2xx body that still reports failure (`success: false`, `status: error`) is a rejected mutation."""
    if is_rejection(body):
        raise OperationFailed(backend_message(body, fallback, message_keys), payload=body)
