from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional, Protocol, Sequence

from teleguard.llm.providers.gemini_api import GeminiProvider
from teleguard.llm.providers.local_llm_api import LocalLLMProvider
from teleguard.utils.config import AppConfig

logger = logging.getLogger(__name__)

LLMRole = Literal["checklist"]


class ChatProvider(Protocol):
    def chat(self, messages: List[Dict[str, str]], response_schema: Optional[Dict[str, Any]] = None) -> str:
        ...


@dataclass
class LLMRequest:
    messages: List[Dict[str, str]]
    role: LLMRole = "checklist"
    response_schema: Optional[Dict[str, Any]] = None


def build_provider(name: str, cfg: AppConfig) -> ChatProvider:
    if name == "gemini":
        return GeminiProvider(model=cfg.gemini_model)
    if name == "local":
        return LocalLLMProvider(model=cfg.local_llm_model, url=cfg.local_llm_url)
    raise ValueError(f"Unknown LLM provider: {name!r} (expected 'gemini' or 'local')")


class LLMRouter:
    """
    Simple multi-provider router:
    - Chooses provider chain based on `role`
    - Tries providers in order, falling back on exceptions
    """

    def __init__(self, providers_by_role: Dict[str, Sequence[ChatProvider]]) -> None:
        self.providers_by_role = {role: list(chain) for role, chain in providers_by_role.items()}

    @classmethod
    def from_config(cls, cfg: AppConfig) -> "LLMRouter":
        chain = [build_provider(name, cfg) for name in cfg.providers]
        return cls({"checklist": chain})

    def call(self, req: LLMRequest) -> str:
        role: LLMRole = req.role
        providers = self.providers_by_role.get(role, [])

        if not providers:
            raise RuntimeError(f"No LLM providers configured for role: {role}")

        last_error: Exception | None = None

        for idx, provider in enumerate(providers):
            provider_name = getattr(provider, "name", provider.__class__.__name__)
            logger.info("LLMRouter: role=%s trying provider[%d]=%s", role, idx, provider_name)

            try:
                return provider.chat(req.messages, response_schema=req.response_schema)
            except Exception as exc:  # noqa: BLE001
                last_error = exc
                logger.warning(
                    "LLMRouter: provider %s for role=%s failed (%s). Trying next provider if any.",
                    provider_name,
                    role,
                    exc,
                )
                continue

        # All providers failed
        raise RuntimeError(f"All LLM providers failed for role={role}: {last_error}")
