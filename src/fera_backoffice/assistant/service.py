from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import today_local
from ..core.constants import ASSISTANT_FALLBACK_REPLY
from ..core.exceptions import ValidationError
from ..store.snapshot import AppSnapshot
from .client import AssistantClient, AssistantError
from .context import build_assistant_context

logger = logging.getLogger(__name__)

TEMPERATURE = 0.7

SYSTEM_INSTRUCTION = (
    "Você é o Diretor de Operações da Fera Service.\n"
    "Você tem acesso aos seguintes dados em tempo real: {context}.\n"
    "Sua missão é ajudar o gestor a tomar decisões sobre faturamento, produtividade e estoque.\n"
    "Seja conciso, profissional e use R$ para valores monetários."
)


@dataclass(frozen=True)
class ChatMessage:
    role: str  # "user" | "bot"
    text: str


def to_contents(history: Iterable[ChatMessage]) -> list[dict]:
    return [
        {"role": "model" if m.role == "bot" else "user", "parts": [{"text": m.text}]}
        for m in history
        if m.text
    ]


class AssistantService:
    def __init__(self, client: Optional[AssistantClient]):
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def ask(self, history: list[ChatMessage], snapshot: AppSnapshot, *, today: date | None = None) -> str:
        if not history or history[-1].role != "user" or not history[-1].text.strip():
            raise ValidationError("Mensagem vazia")
        if self._client is None:
            logger.warning("assistant called without an API key configured")
            return ASSISTANT_FALLBACK_REPLY

        context = build_assistant_context(snapshot, today or today_local())
        instruction = SYSTEM_INSTRUCTION.format(context=json.dumps(context, ensure_ascii=False))
        try:
            return self._client.generate(to_contents(history), system_instruction=instruction, temperature=TEMPERATURE)
        except AssistantError:
            logger.exception("assistant request failed")
            return ASSISTANT_FALLBACK_REPLY
