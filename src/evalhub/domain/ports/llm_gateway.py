"""Port: LLM gateway — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol


class LlmGateway(Protocol):
    """Chat-completion access to one model under one credential."""

    #: Short name used in log lines ("primary", "backup", ...); never the key.
    label: str

    async def complete(
        self, system_prompt: str, user_prompt: str, *, json_mode: bool = True
    ) -> str:
        """Return the raw completion text, raising ``LlmError`` on any failure."""
        ...

    async def close(self) -> None:
        """Release transport resources held by the gateway."""
        ...
