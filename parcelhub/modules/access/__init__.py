"""Access policy exports."""

from .policy import AccessPolicy, Operation, default_policy

__all__ = ["AccessPolicy", "Operation", "default_policy"]
