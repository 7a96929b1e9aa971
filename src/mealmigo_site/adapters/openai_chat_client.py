"""OpenAI Chat Completions client for the site chatbot."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from mealmigo_site.services.chat import ChatClient


@dataclass
class OpenAIChatClient(ChatClient):
    """Chat client backed by the OpenAI Chat Completions API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIChatClient":
        """Create an OpenAI chat client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def complete(self, *, model: str, message: str, max_tokens: int) -> str | None:
        """Send one user message and return the first choice's content."""
        response = await self.client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": message}],
            max_tokens=max_tokens,
        )
        if not response.choices:
            return None
        return response.choices[0].message.content

    async def close(self) -> None:
        await self.client.close()
