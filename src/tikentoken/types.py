"""Core request/result types for the tikentoken gateway."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


class Operation(str, Enum):
    TOKENIZE = "tokenize"
    EMBED = "embed"
    CHAT = "chat"

    @property
    def path(self) -> str:
        return _OPERATION_PATHS[self]

    @property
    def label(self) -> str:
        return _OPERATION_LABELS[self]


_OPERATION_PATHS = {
    Operation.TOKENIZE: "/api/tokenize",
    Operation.EMBED: "/api/embeddings",
    Operation.CHAT: "/api/generate",
}

_OPERATION_LABELS = {
    Operation.TOKENIZE: "Tokenization",
    Operation.EMBED: "Embedding",
    Operation.CHAT: "Chat",
}


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    reason: str

    @property
    def ok(self) -> bool:
        return False


Result = Union[Success[T], Failure]


@dataclass(frozen=True)
class HttpSuccess:
    """2xx response. ``body`` is the decoded JSON value, or None if undecodable."""

    status_code: int
    body: Any


@dataclass(frozen=True)
class HttpError:
    """Non-2xx response from the service."""

    status_code: int
    body: Any


@dataclass(frozen=True)
class TransportFailure:
    """The exchange could not be completed within the retry and timeout budget."""

    cause: str


TransportOutcome = Union[HttpSuccess, HttpError, TransportFailure]
