import os
from typing import Any, Dict, List, Optional

from google import genai


class GeminiProvider:
    """
    Gemini Developer API via Google Gen AI SDK (google-genai).
    Uses GEMINI_API_KEY, read when the first request is made.
    """

    name = "gemini"

    def __init__(self, model: str = "gemini-2.5-flash", api_key: Optional[str] = None):
        self.model = model
        self._api_key = api_key
        self._client: Optional[genai.Client] = None

    def _get_client(self) -> genai.Client:
        if self._client is None:
            api_key = self._api_key or os.getenv("GEMINI_API_KEY")
            if not api_key:
                raise RuntimeError("API key not found. Set GEMINI_API_KEY in the environment or .env file.")
            # This client uses the Gemini Developer API when given an API key.
            self._client = genai.Client(api_key=api_key)
        return self._client

    def chat(self, messages: List[Dict[str, str]], response_schema: Optional[Dict[str, Any]] = None) -> str:
        # Flatten role-based messages into a single prompt.
        parts = []
        for m in messages:
            role = m.get("role", "user").upper()
            content = m.get("content", "")
            parts.append(f"{role}:\n{content}")
        prompt = "\n\n".join(parts)

        config: Optional[Dict[str, Any]] = None
        if response_schema is not None:
            config = {
                "response_mime_type": "application/json",
                "response_schema": response_schema,
            }

        resp = self._get_client().models.generate_content(
            model=self.model,
            contents=prompt,
            config=config,
        )
        return resp.text or ""
