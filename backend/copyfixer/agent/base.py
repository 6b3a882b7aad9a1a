from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

from copyfixer.agent.llm_client import LLMClient
from copyfixer.core.config import settings

InType = TypeVar("InType", bound=BaseModel)
OutType = TypeVar("OutType")


class BaseAgent(ABC, Generic[InType, OutType]):
    """Abstract base class for agents backed by the chat-completions client."""

    def __init__(self, model_name: str | None = None, llm: LLMClient | None = None):
        self.llm = llm or LLMClient(model_name=model_name or settings.MODEL_DEFAULT)

    @abstractmethod
    async def run(self, input_data: InType) -> OutType:
        """Run the agent on the given input."""
        pass
