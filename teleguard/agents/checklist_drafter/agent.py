from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, List

from pydantic import ValidationError as SchemaError

from teleguard.agents.shared.base_agent import BaseAgent
from teleguard.checklist.drafts import CHECKLIST_RESPONSE_SCHEMA, DraftChecklist, DraftSection
from teleguard.checklist.errors import GenerationError
from teleguard.llm.router.llm_router import LLMRouter

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class ChecklistDrafterAgent(BaseAgent):
    """
    Drafts an inspection checklist for a piece of equipment.

    Any failure (no provider reachable, missing credential, empty or
    malformed output, an empty checklist) is raised as GenerationError.
    """

    def __init__(self, llm_router: LLMRouter, language: str = "English") -> None:
        super().__init__(llm_router)
        self.language = language
        self._prompt_path = Path(__file__).with_name("prompt.md")
        self._system_prompt = self._prompt_path.read_text(encoding="utf-8")

    def run(self, equipment_type: str, context: str = "") -> List[DraftSection]:
        self.logger.info("Drafting checklist for equipment: %s", equipment_type)

        user_prompt = (
            f'Create an installation inspection checklist for: "{equipment_type}"\n'
            f'Context / specific requirements: "{context or "none"}"\n'
            f"Language: {self.language} (formal engineering terms)."
        )

        try:
            raw = self._call_llm(
                system_prompt=self._system_prompt,
                user_prompt=user_prompt,
                role="checklist",
                response_schema=CHECKLIST_RESPONSE_SCHEMA,
            )
        except Exception as exc:  # noqa: BLE001
            self.logger.error("Checklist generation failed: %s", exc)
            raise GenerationError(f"Could not generate the checklist: {exc}") from exc

        sections = self.parse(raw)
        self.logger.info(
            "Drafted %d sections, %d items",
            len(sections),
            sum(len(s.items) for s in sections),
        )
        return sections

    @staticmethod
    def parse(raw: str) -> List[DraftSection]:
        text = (raw or "").strip()
        if not text:
            raise GenerationError("The model returned an empty response.")

        fenced = _FENCE_RE.match(text)
        if fenced:
            text = fenced.group(1)

        try:
            payload: Any = json.loads(text)
        except json.JSONDecodeError as exc:
            raise GenerationError(f"The model response is not valid JSON: {exc}") from exc

        # JSON-mode local models tend to wrap the array in an object.
        if isinstance(payload, dict) and isinstance(payload.get("sections"), list):
            payload = payload["sections"]

        try:
            sections = DraftChecklist.model_validate(payload).root
        except SchemaError as exc:
            raise GenerationError(f"The model response does not match the checklist format: {exc}") from exc

        if not sections:
            raise GenerationError("The model returned an empty checklist.")
        return sections
