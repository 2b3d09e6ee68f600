"""Return envelope shared by every client operation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class Result(Generic[T]):
    """Decoded data plus the headers of the response that produced it.

    Header names are lower-cased (e.g. `ratelimit-remaining`, `request-id`).
    """

    data: T
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def request_id(self) -> str:
        return self.headers.get("request-id", "")
