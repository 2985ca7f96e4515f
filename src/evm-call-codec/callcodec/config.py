import os
from dataclasses import dataclass
from typing import Optional

from .words import is_decimal

DEFAULT_BLOCK_TAG = "latest"
BLOCK_TAGS = {"latest", "earliest", "pending", "safe", "finalized"}


@dataclass
class Config:
    rpc_url: str
    block_tag: str = DEFAULT_BLOCK_TAG
    request_timeout: int = 10
    max_retries: int = 3
    backoff_seconds: float = 0.5
    log_level: str = "WARNING"


def normalize_block_tag(tag: Optional[str]) -> str:
    """Accept a named tag, a decimal block number or 0x-hex; return the RPC form."""
    if tag is None:
        return DEFAULT_BLOCK_TAG
    if isinstance(tag, int) and not isinstance(tag, bool):
        if tag < 0:
            raise ValueError("block_tag must be non-negative.")
        return hex(tag)
    text = str(tag).strip().lower()
    if not text:
        return DEFAULT_BLOCK_TAG
    if text in BLOCK_TAGS:
        return text
    if is_decimal(text):
        return hex(int(text))
    if text.startswith("0x") and len(text) > 2:
        try:
            return hex(int(text, 16))
        except ValueError:
            pass
    raise ValueError(f"Invalid block tag '{tag}'. Use latest/earliest/pending/safe/finalized or a block number.")


def _env_number(name: str, default: str, cast):
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got '{raw}'.") from exc


def load_config(rpc_url: Optional[str] = None) -> Config:
    """Load configuration from environment variables; ``rpc_url`` overrides RPC_URL."""
    url = (rpc_url or os.getenv("RPC_URL") or "").strip()
    if not url:
        raise ValueError("RPC_URL is required but not set.")

    return Config(
        rpc_url=url,
        block_tag=normalize_block_tag(os.getenv("BLOCK_TAG")),
        request_timeout=_env_number("REQUEST_TIMEOUT", "10", int),
        max_retries=_env_number("REQUEST_RETRIES", "3", int),
        backoff_seconds=_env_number("REQUEST_BACKOFF_SECONDS", "0.5", float),
        log_level=os.getenv("LOG_LEVEL", "WARNING").strip().upper() or "WARNING",
    )
