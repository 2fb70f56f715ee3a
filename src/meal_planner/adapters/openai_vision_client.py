"""OpenAI Responses API client for photo identification."""

from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from meal_planner.errors import UpstreamServiceError
from meal_planner.services.vision import VisionClient


@dataclass
class OpenAIVisionClient(VisionClient):
    """Vision client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIVisionClient":
        """Create an OpenAI vision client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def extract(
        self,
        *,
        model: str,
        image_url: str,
        schema_name: str,
        schema: dict[str, object],
        prompt: str,
    ) -> str:
        """Call OpenAI Responses API with structured outputs."""
        try:
            response = await self.client.responses.create(
                model=model,
                input=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "input_text", "text": prompt},
                            {"type": "input_image", "image_url": image_url},
                        ],
                    }
                ],
                text={
                    "format": {
                        "type": "json_schema",
                        "name": schema_name,
                        "strict": True,
                        "schema": schema,
                    }
                },
                temperature=0.3,
                store=False,
            )
        except OpenAIError as exc:
            raise UpstreamServiceError("OpenAI", str(exc)) from exc
        return response.output_text or ""

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
