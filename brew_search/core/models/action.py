"""
Receipt model — what a ``brew`` invocation left behind.

Adapters hand back a Receipt instead of raising.  Whether a failed
receipt ends the run is the caller's call: a failed ``brew bundle`` is
fatal, one failed ``brew install`` in immediate mode is a warning.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class Receipt(BaseModel):
    """Outcome of one brew command."""

    adapter: str                          # "brew" or "dry-run"
    command: list[str] = Field(default_factory=list)
    status: Literal["ok", "failed"] = "ok"

    duration_ms: int = 0
    return_code: int | None = None        # None when the process never started
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @property
    def command_line(self) -> str:
        """The argv joined for display (``brew install --cask vlc``)."""
        return " ".join(self.command)

    @classmethod
    def success(cls, adapter: str, command: list[str], **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, command=command, **kwargs)

    @classmethod
    def failure(cls, adapter: str, command: list[str], error: str, **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, command=command, status="failed", error=error, **kwargs)

    @classmethod
    def from_exit(
        cls,
        adapter: str,
        command: list[str],
        return_code: int,
        duration_ms: int = 0,
    ) -> Receipt:
        """Build a receipt from a finished process's exit status."""
        if return_code == 0:
            return cls.success(adapter, command, return_code=0, duration_ms=duration_ms)
        return cls.failure(
            adapter,
            command,
            error=f"exit status {return_code}",
            return_code=return_code,
            duration_ms=duration_ms,
        )
