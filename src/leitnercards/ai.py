"""AI service module for generating flashcard hints."""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import google.generativeai as genai
import openai

from .algorithm import get_hint
from .core import Flashcard

logger = logging.getLogger(__name__)


def _create_prompt(card: Flashcard) -> str:
    """Creates the prompt asking for a hint that does not give away the answer.

    Args:
        card: The card to write a hint for.

    Returns:
        The formatted prompt string.
    """
    tags_text = ", ".join(sorted(card.tags)) or "none"

    return f"""Write a short hint for this flashcard that:
* Helps the learner recall the answer without stating it
* Never contains the answer text itself
* Is at most one sentence

Question: {card.front}
Answer: {card.back}
Tags: {tags_text}

Return only the hint, no explanations."""


def _clean_response(text: str, card: Flashcard) -> Optional[str]:
    """Strips quotes from a model response and rejects hints that leak the answer."""
    hint = text.strip()
    if hint.startswith('"') and hint.endswith('"'):
        hint = hint[1:-1].strip()
    if not hint:
        return None
    if card.back and card.back.lower() in hint.lower():
        return None
    return hint


def _get_openai_client(api_key: str) -> openai.OpenAI:
    return openai.OpenAI(api_key=api_key)


def _get_gemini_client(api_key: str, model_name: str) -> genai.GenerativeModel:
    genai.configure(api_key=api_key)
    return genai.GenerativeModel(model_name)


class HintService(ABC):
    """Abstract base class for AI hint services."""

    @abstractmethod
    def generate_hint(self, card: Flashcard, api_key: Optional[str]) -> str:
        """Generates a hint for the given card.

        Args:
            card: The card to write a hint for.
            api_key: The API key for the AI service.

        Returns:
            A hint for the card. Implementations fall back to the masked-front
            hint from ``get_hint`` when no model produces a usable one.
        """


class OpenAIHintService(HintService):
    """OpenAI API service for generating hints."""

    preferred_model_families = ["gpt-4o-mini", "gpt-4", "gpt-3.5-turbo"]

    def __init__(self):
        self.client: Optional[openai.OpenAI] = None

    def generate_hint(self, card: Flashcard, api_key: Optional[str]) -> str:
        """Generates a hint using the OpenAI API.

        Args:
            card: The card to write a hint for.
            api_key: The OpenAI API key.

        Returns:
            The generated hint, or the masked-front hint if no key is given
            or every model fails.
        """
        if card.hint:
            return card.hint
        if not api_key:
            logger.info("No OpenAI API key, using masked hint")
            return get_hint(card)

        self.client = _get_openai_client(api_key)
        prompt = _create_prompt(card)

        try:
            available_models = [
                m.id
                for m in self.client.models.list()
                if m.id.startswith(tuple(self.preferred_model_families))
            ]
        except openai.OpenAIError as e:
            logger.warning("Error listing OpenAI models: %s", e)
            available_models = list(self.preferred_model_families)

        for model_name in _prioritize(available_models, self.preferred_model_families):
            try:
                logger.debug("Requesting hint from OpenAI model %s", model_name)
                response = self.client.chat.completions.create(
                    model=model_name,
                    messages=[
                        {
                            "role": "system",
                            "content": "You are a study assistant. Write hints that help recall without revealing answers.",
                        },
                        {"role": "user", "content": prompt},
                    ],
                    max_tokens=60,
                    temperature=0.7,
                )
                hint = _clean_response(response.choices[0].message.content or "", card)
                if hint:
                    return hint
                logger.warning("OpenAI model %s returned an unusable hint", model_name)
            except openai.OpenAIError as e:
                logger.warning("Error with OpenAI model %s: %s", model_name, e)

        return get_hint(card)


class GeminiHintService(HintService):
    """Google Gemini API service for generating hints."""

    preferred_model_families = ["models/gemini-2.5-flash-lite", "models/gemini-1.5-flash"]

    def __init__(self):
        self.client: Optional[genai.GenerativeModel] = None

    def generate_hint(self, card: Flashcard, api_key: Optional[str]) -> str:
        """Generates a hint using the Google Gemini API.

        Args:
            card: The card to write a hint for.
            api_key: The Google Gemini API key.

        Returns:
            The generated hint, or the masked-front hint if no key is given
            or every model fails.
        """
        if card.hint:
            return card.hint
        if not api_key:
            logger.info("No Gemini API key, using masked hint")
            return get_hint(card)

        prompt = _create_prompt(card)

        try:
            genai.configure(api_key=api_key)
            available_models = [
                m.name
                for m in genai.list_models()
                if "generateContent" in m.supported_generation_methods
            ]
        except Exception as e:
            logger.warning("Error listing Gemini models: %s", e)
            available_models = list(self.preferred_model_families)

        for model_name in _prioritize(available_models, self.preferred_model_families):
            try:
                logger.debug("Requesting hint from Gemini model %s", model_name)
                self.client = _get_gemini_client(api_key, model_name)
                response = self.client.generate_content(
                    prompt, generation_config={"temperature": 0.7}
                )
                hint = _clean_response(response.text, card)
                if hint:
                    return hint
                logger.warning("Gemini model %s returned an unusable hint", model_name)
            except Exception as e:
                logger.warning("Error with Gemini model %s: %s", model_name, e)

        return get_hint(card)


def _prioritize(available: List[str], preferred_families: List[str]) -> List[str]:
    """Orders models: the latest of each preferred family first, in family order."""
    models_to_try: List[str] = []
    for family in preferred_families:
        matching = sorted(
            (m for m in available if m.startswith(family) and m not in models_to_try),
            reverse=True,
        )
        if matching:
            models_to_try.append(matching[0])
    return models_to_try


class HintServiceFactory:
    """Factory for creating hint service instances."""

    @staticmethod
    def create_service(service_type: str) -> HintService:
        """Creates a hint service by name.

        Args:
            service_type: "openai" or "gemini".

        Raises:
            ValueError: If an unknown service type is provided.
        """
        if service_type.lower() == "openai":
            return OpenAIHintService()
        elif service_type.lower() == "gemini":
            return GeminiHintService()
        else:
            raise ValueError(f"Unknown AI service type: {service_type}")

    @staticmethod
    def get_available_services() -> List[str]:
        return ["openai", "gemini"]
