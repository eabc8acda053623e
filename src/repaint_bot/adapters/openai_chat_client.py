"""OpenAI Responses API client for chat completion."""

from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from repaint_bot.errors import CollaboratorUnavailable
from repaint_bot.services.meta import ChatClient


@dataclass
class OpenAIChatClient(ChatClient):
    """Chat client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    model: str

    @classmethod
    def create(
        cls, api_key: str, model: str, timeout: float = 30
    ) -> "OpenAIChatClient":
        """Create an OpenAI chat client."""
        return cls(client=AsyncOpenAI(api_key=api_key, timeout=timeout), model=model)

    async def complete(self, prompt: str, max_tokens: int) -> str:
        """Call OpenAI Responses API with a plain-text instruction."""
        try:
            response = await self.client.responses.create(
                model=self.model,
                input=prompt,
                max_output_tokens=max_tokens,
                store=False,
            )
        except OpenAIError as exc:
            raise CollaboratorUnavailable(f"chat service failed: {exc}") from exc
        return response.output_text or ""

    async def close(self) -> None:
        """Close the underlying OpenAI HTTP client."""
        await self.client.close()
