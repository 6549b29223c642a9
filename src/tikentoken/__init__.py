"""Tokenization, embedding and chat gateway for Ollama-style inference services."""

from tikentoken.config import DEFAULT_BASE_URL, GatewayConfig, RetryPolicy, resolve_config
from tikentoken.fallback import fallback_tokenize
from tikentoken.gateway import Gateway, chat, embed, tokenize
from tikentoken.options import OptionsError, merge_options, parse_extra_options
from tikentoken.transport import Transport
from tikentoken.types import (
    Failure,
    HttpError,
    HttpSuccess,
    Operation,
    Result,
    Success,
    TransportFailure,
    TransportOutcome,
)

__all__ = [
    "DEFAULT_BASE_URL",
    "Failure",
    "Gateway",
    "GatewayConfig",
    "HttpError",
    "HttpSuccess",
    "Operation",
    "OptionsError",
    "Result",
    "RetryPolicy",
    "Success",
    "Transport",
    "TransportFailure",
    "TransportOutcome",
    "chat",
    "embed",
    "fallback_tokenize",
    "merge_options",
    "parse_extra_options",
    "resolve_config",
    "tokenize",
]
