"""Three-state lookup results.

Lookups distinguish "the thing is not there" from "looking for it failed":

- Found: the value was located
- Absent: the lookup succeeded but nothing matched
- Failed: the lookup could not be completed, with a reason

Callers branch with isinstance checks:

    result = client.fetch_metadata("publisher.name")
    if isinstance(result, Failed):
        ...
    if isinstance(result, Absent):
        ...
    metadata = result.value
"""

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Found(Generic[T]):
    """A successful lookup carrying its value."""

    value: T


@dataclass(frozen=True)
class Absent:
    """A completed lookup that matched nothing."""


@dataclass(frozen=True)
class Failed:
    """A lookup that could not be completed."""

    reason: str


Lookup: TypeAlias = Found[T] | Absent | Failed
