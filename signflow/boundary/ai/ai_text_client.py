"""
Gemini text client.

Thin text-in/text-out wrapper around ChatGoogleGenerativeAI. Each call
renders a prompt template, invokes the model and returns the raw text.
Parsing and fallbacks live in the application layer.

Dependencies: langchain_core, langchain_google_genai
System role: AI text service boundary
"""

import asyncio
import logging
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate
from langchain_google_genai import ChatGoogleGenerativeAI

from signflow.boundary.ai.prompts import (
    ANALYSIS_PROMPT,
    CONTRACT_PROMPT,
    FIELD_DETECTION_PROMPT,
)
from signflow.core.exceptions import AIServiceError

logger = logging.getLogger(__name__)


class AITextClient:
    """
    Text client for the three AI capabilities.

    Every call is bounded by request_timeout; a timeout or provider error
    surfaces as AIServiceError.
    """

    def __init__(
        self,
        analysis_model: BaseChatModel,
        detection_model: BaseChatModel,
        generation_model: BaseChatModel,
        request_timeout: float = 60.0,
    ) -> None:
        """
        Initialize client with pre-built chat models.

        Args:
            analysis_model: Model used for document analysis
            detection_model: Model used for field detection
            generation_model: Model used for contract drafting
            request_timeout: Upper bound in seconds for one call
        """
        self._analysis_model = analysis_model
        self._detection_model = detection_model
        self._generation_model = generation_model
        self._request_timeout = request_timeout

    @classmethod
    def from_settings(cls, ai_settings) -> "AITextClient":
        """
        Build Gemini models from AISettings.

        Args:
            ai_settings: AISettings instance

        Returns:
            AITextClient wired to Gemini
        """
        def build(model_id: str, temperature: float) -> ChatGoogleGenerativeAI:
            return ChatGoogleGenerativeAI(
                model=model_id,
                temperature=temperature,
                google_api_key=ai_settings.google_api_key,
                max_retries=1,
            )

        logger.info(
            f"{__name__}:from_settings - Creating Gemini models",
            extra={
                "analysis_model": ai_settings.analysis_model_id,
                "detection_model": ai_settings.detection_model_id,
            },
        )
        return cls(
            analysis_model=build(ai_settings.analysis_model_id, ai_settings.analysis_temperature),
            detection_model=build(ai_settings.detection_model_id, ai_settings.detection_temperature),
            generation_model=build(ai_settings.analysis_model_id, ai_settings.generation_temperature),
            request_timeout=ai_settings.request_timeout,
        )

    async def _run(
        self,
        operation: str,
        prompt: ChatPromptTemplate,
        model: BaseChatModel,
        variables: dict[str, Any],
    ) -> str:
        chain = prompt | model | StrOutputParser()
        try:
            text = await asyncio.wait_for(chain.ainvoke(variables), timeout=self._request_timeout)
        except asyncio.TimeoutError as e:
            logger.warning(f"{__name__}:{operation} - Timed out after {self._request_timeout}s")
            raise AIServiceError("AI request timed out", operation=operation) from e
        except Exception as e:
            logger.error(f"{__name__}:{operation} - {type(e).__name__}: {e}", exc_info=True)
            raise AIServiceError("AI request failed", operation=operation) from e

        if not text or not text.strip():
            raise AIServiceError("AI returned an empty response", operation=operation)
        return text

    async def analyze(self, document_text: str) -> str:
        """Raw model output for a document analysis request."""
        return await self._run(
            "analyze", ANALYSIS_PROMPT, self._analysis_model, {"document_text": document_text}
        )

    async def detect_fields(self, document_text: str) -> str:
        """Raw model output for a field detection request."""
        return await self._run(
            "detect_fields",
            FIELD_DETECTION_PROMPT,
            self._detection_model,
            {"document_text": document_text},
        )

    async def generate_contract(self, prompt: str, contract_type: str) -> str:
        """Generated contract text."""
        return await self._run(
            "generate_contract",
            CONTRACT_PROMPT,
            self._generation_model,
            {"prompt": prompt, "contract_type": contract_type},
        )
