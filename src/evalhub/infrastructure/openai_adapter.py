"""OpenAI adapter — implements the LlmGateway port."""

from __future__ import annotations

import logging

from openai import APITimeoutError, AsyncOpenAI, AuthenticationError, RateLimitError

from evalhub.domain.exceptions import LlmError

logger = logging.getLogger(__name__)


class OpenAIAdapter:
    """Concrete ``LlmGateway`` backed by the OpenAI chat-completions API.

    The SDK client is built by the caller at startup and passed in, so a
    process holds exactly one client per credential.
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = "gpt-4o-mini",
        *,
        label: str = "primary",
        temperature: float = 0.2,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = temperature
        self.label = label

    @classmethod
    def from_api_key(cls, api_key: str, model: str, *, label: str = "primary") -> OpenAIAdapter:
        return cls(AsyncOpenAI(api_key=api_key, max_retries=2), model, label=label)

    async def complete(
        self, system_prompt: str, user_prompt: str, *, json_mode: bool = True
    ) -> str:
        """Send a system + user prompt and return the completion text."""
        try:
            kwargs: dict[str, object] = {
                "model": self._model,
                "messages": [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                "temperature": self._temperature,
            }
            if json_mode:
                kwargs["response_format"] = {"type": "json_object"}

            response = await self._client.chat.completions.create(**kwargs)  # type: ignore[arg-type]

            content = response.choices[0].message.content if response.choices else None
            if not content:
                raise LlmError(f"LLM ({self.label}) returned an empty response.")

            return content

        except AuthenticationError as exc:
            raise LlmError(
                f"OpenAI rejected the {self.label} API key. "
                "Check OPENAI_API_KEY / OPENAI_BACKUP_API_KEY."
            ) from exc

        except RateLimitError as exc:
            logger.error("OpenAI RateLimitError (%s): %s", self.label, exc)
            raise LlmError(f"OpenAI rate limit / quota error: {exc}") from exc

        except APITimeoutError as exc:
            raise LlmError(f"OpenAI request timed out ({self.label}).") from exc

        except LlmError:
            raise

        except Exception as exc:
            raise LlmError(f"LLM call failed: {exc}") from exc

    async def close(self) -> None:
        """Release underlying HTTP resources."""
        await self._client.close()
