"""Ordered credential failover for LLM calls.

Credentials are tried strictly in order.  A failed attempt leaves nothing
behind, so the next one starts clean; the first success wins and, if every
attempt fails, the last error is raised.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Sequence, TypeVar

from evalhub.domain.exceptions import LlmError
from evalhub.domain.ports.llm_gateway import LlmGateway

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def first_success(attempts: Sequence[tuple[str, Callable[[], Awaitable[T]]]]) -> T:
    """Run labelled zero-arg coroutine factories in order; return the first result.

    Only :class:`LlmError` advances to the next attempt; anything else is a
    programming error and propagates immediately.
    """
    last_error = LlmError("No LLM credentials configured.")
    for label, attempt in attempts:
        try:
            return await attempt()
        except LlmError as exc:
            logger.warning("LLM attempt with %s credential failed: %s", label, exc)
            last_error = exc
    raise last_error


class FailoverLlmGateway:
    """``LlmGateway`` that delegates to several gateways, primary first."""

    label = "failover"

    def __init__(self, gateways: Sequence[LlmGateway]) -> None:
        self._gateways = list(gateways)

    async def complete(
        self, system_prompt: str, user_prompt: str, *, json_mode: bool = True
    ) -> str:
        def _attempt(gateway: LlmGateway) -> Callable[[], Awaitable[str]]:
            return lambda: gateway.complete(system_prompt, user_prompt, json_mode=json_mode)

        return await first_success([(g.label, _attempt(g)) for g in self._gateways])

    async def close(self) -> None:
        for gateway in self._gateways:
            await gateway.close()
