"""Gateway configuration and environment resolution."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import os

from tikentoken.types import Operation

DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_TOKENIZE_MODEL = "embeddinggemma"
DEFAULT_EMBED_MODEL = "embeddinggemma"
DEFAULT_CHAT_MODEL = "tinyllama"
DEFAULT_EMBED_DIM = 768

DEFAULT_TIMEOUTS_MS: dict[Operation, int] = {
    Operation.TOKENIZE: 30_000,
    Operation.EMBED: 60_000,
    Operation.CHAT: 120_000,
}


@dataclass(frozen=True)
class RetryPolicy:
    attempts: int = 3
    backoff_s: float = 0.25

    def delay_for(self, attempt: int) -> float:
        return self.backoff_s * (2 ** (attempt - 1))

    def to_dict(self) -> dict:
        return {
            "attempts": self.attempts,
            "backoff_s": self.backoff_s,
        }


@dataclass(frozen=True)
class GatewayConfig:
    base_url: str = DEFAULT_BASE_URL
    tokenize_model: str = DEFAULT_TOKENIZE_MODEL
    embed_model: str = DEFAULT_EMBED_MODEL
    chat_model: str = DEFAULT_CHAT_MODEL
    embed_dim: int = DEFAULT_EMBED_DIM
    timeouts_ms: dict[Operation, int] = field(default_factory=lambda: dict(DEFAULT_TIMEOUTS_MS))
    retry: RetryPolicy = field(default_factory=RetryPolicy)

    def timeout_for(self, operation: Operation) -> int:
        return self.timeouts_ms.get(operation, DEFAULT_TIMEOUTS_MS[operation])

    def with_base_url(self, base_url: str | None) -> "GatewayConfig":
        if not base_url:
            return self
        return replace(self, base_url=base_url)

    def to_dict(self) -> dict:
        return {
            "base_url": self.base_url,
            "tokenize_model": self.tokenize_model,
            "embed_model": self.embed_model,
            "chat_model": self.chat_model,
            "embed_dim": self.embed_dim,
            "timeouts_ms": {operation.value: value for operation, value in self.timeouts_ms.items()},
            "retry": self.retry.to_dict(),
        }


def resolve_config(environ: dict[str, str] | None = None) -> GatewayConfig:
    env = os.environ if environ is None else environ
    retry = RetryPolicy()
    retries_raw = env.get("TIKENTOKEN_RETRIES")
    if retries_raw:
        try:
            attempts = int(retries_raw)
        except ValueError as exc:
            raise ValueError(f"TIKENTOKEN_RETRIES must be an integer, got {retries_raw!r}") from exc
        retry = replace(retry, attempts=max(1, attempts))
    return GatewayConfig(
        base_url=env.get("OLLAMA_URL") or DEFAULT_BASE_URL,
        tokenize_model=env.get("TIKENTOKEN_TOKENIZE_MODEL") or DEFAULT_TOKENIZE_MODEL,
        embed_model=env.get("TIKENTOKEN_EMBED_MODEL") or DEFAULT_EMBED_MODEL,
        chat_model=env.get("TIKENTOKEN_CHAT_MODEL") or DEFAULT_CHAT_MODEL,
        retry=retry,
    )
