"""Request option merging and CLI option parsing."""

from __future__ import annotations

from typing import Any, Mapping

CHAT_DEFAULTS: dict[str, Any] = {
    "stream": False,
    "temperature": 0.7,
}

TOKENIZE_DEFAULTS: dict[str, Any] = {}


class OptionsError(ValueError):
    pass


def merge_options(
    defaults: Mapping[str, Any],
    overrides: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Return ``defaults`` with ``overrides`` applied on top.

    Keys unknown to the defaults pass through verbatim; the service decides
    whether it understands them. Neither input is mutated.
    """
    merged = dict(defaults)
    if overrides:
        merged.update(overrides)
    return merged


def parse_extra_options(text: str) -> dict[str, str | bool]:
    """Parse ``"add_bos:true,num_ctx:2048"`` style pairs.

    Only the literals ``true`` and ``false`` are coerced; every other value,
    numeric-looking ones included, stays a string.
    """
    options: dict[str, str | bool] = {}
    for segment in text.split(","):
        if not segment.strip():
            continue
        if ":" not in segment:
            raise OptionsError(f"Invalid extra option {segment.strip()!r}: expected key:value")
        key, value = segment.split(":", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            raise OptionsError(f"Invalid extra option {segment.strip()!r}: empty key")
        options[key] = _coerce_literal(value)
    return options


def _coerce_literal(value: str) -> str | bool:
    if value == "true":
        return True
    if value == "false":
        return False
    return value
