from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from teleguard.llm.router.llm_router import LLMRouter, LLMRequest
from teleguard.utils.logger import get_logger


class BaseAgent(ABC):
    """
    Base class for all agents.
    Provides access to the LLM router and a logger.
    """

    def __init__(self, llm_router: LLMRouter) -> None:
        self.llm = llm_router
        self.logger = get_logger(self.__class__.__name__)

    @abstractmethod
    def run(self, **kwargs: Any) -> Any:
        ...

    def _call_llm(
        self,
        system_prompt: str,
        user_prompt: str,
        role: str = "checklist",
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> str:
        messages: List[Dict[str, str]] = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        req = LLMRequest(messages=messages, role=role, response_schema=response_schema)  # type: ignore[arg-type]

        self.logger.info("Calling LLM with role=%s", req.role)
        return self.llm.call(req)
