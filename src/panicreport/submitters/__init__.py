"""
Report submitter implementations.

Supported submitters:
- graphql (hosted error report service)
- local (outbox directory)
"""

from typing import Type

from .base import BaseReportSubmitter
from .graphql import GraphQLReportSubmitter
from .local import LocalReportSubmitter

SUBMITTERS: dict[str, Type[BaseReportSubmitter]] = {
    "graphql": GraphQLReportSubmitter,
    "local": LocalReportSubmitter,
}

DEFAULT_SUBMITTER = "graphql"


def get_submitter(name: str = DEFAULT_SUBMITTER, **kwargs) -> BaseReportSubmitter:
    """
    Build a submitter by name.

    Args:
        name: Submitter name ('graphql' or 'local')
        **kwargs: Passed to the submitter constructor

    Returns:
        Initialized submitter instance

    Raises:
        ValueError: If the name is not recognized
    """
    if name not in SUBMITTERS:
        raise ValueError(
            f"Unknown submitter: {name}. Available submitters: {list(SUBMITTERS.keys())}"
        )
    return SUBMITTERS[name](**kwargs)


def list_submitters() -> list[str]:
    """List all available submitters."""
    return list(SUBMITTERS.keys())


__all__ = [
    "BaseReportSubmitter",
    "GraphQLReportSubmitter",
    "LocalReportSubmitter",
    "SUBMITTERS",
    "DEFAULT_SUBMITTER",
    "get_submitter",
    "list_submitters",
]
