"""
Response normalization and failure policy shared by every domain service.
"""

from .failure_policy import FailurePolicy, declared_policies, describe_failure, failure_policy, raise_if_rejected

__all__ = ["FailurePolicy", "declared_policies", "describe_failure", "failure_policy", "raise_if_rejected"]
