"""OpenAI chat completions client for meal recommendations."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from meal_planner.services.recommendations import ChatClient


@dataclass
class OpenAIChatClient(ChatClient):
    """Chat client backed by OpenAI chat completions."""

    client: AsyncOpenAI
    temperature: float = 0.7
    max_tokens: int = 2000

    @classmethod
    def create(cls, api_key: str) -> "OpenAIChatClient":
        """Create an OpenAI chat client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def complete(self, *, model: str, system: str, prompt: str) -> str:
        """Return the first choice's message content."""
        response = await self.client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        return response.choices[0].message.content or ""

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
