# Gemini 기반 개입 문구 생성

import os
import logging
import google.generativeai as genai

from yaqdah.models.phrases import (
    DEFAULT_PROMPT,
    INTERVENTION_PROMPTS,
    fallback_phrase,
    language_name,
)

logger = logging.getLogger(__name__)

# 전역 변수 - Gemini 모델
_gemini_model = None


def init_gemini_model(api_key=None, model_name="gemini-2.0-flash"):
    """Gemini 모델 초기화"""
    global _gemini_model

    try:
        api_key = api_key or os.environ.get("GEMINI_API_KEY")
        if not api_key:
            logger.error("GEMINI_API_KEY is not set, using fallback phrases")
            return None

        genai.configure(api_key=api_key)
        _gemini_model = genai.GenerativeModel(model_name)

        logger.info(f"Gemini model ready ({model_name})")
        return _gemini_model
    except Exception as e:
        logger.error(f"Gemini initialisation failed: {str(e)}")
        return None


def get_gemini_model():
    """Gemini 모델 반환"""
    global _gemini_model
    if _gemini_model is None:
        return init_gemini_model()
    return _gemini_model


def build_prompt(state_label, language="ar"):
    template = INTERVENTION_PROMPTS.get(state_label, DEFAULT_PROMPT)
    return template.format(language=language_name(language))


def get_intervention(state_label, language="ar", model=None):
    """
    Short spoken phrase for the given alertness state.

    Never raises: any failure falls back to a fixed phrase for the state.
    """
    try:
        if model is None:
            model = get_gemini_model()
            if model is None:
                return fallback_phrase(state_label, language)

        response = model.generate_content(build_prompt(state_label, language))
        text = getattr(response, "text", None) if response else None
        if not text or not text.strip():
            logger.warning(f"Empty Gemini response for {state_label}")
            return fallback_phrase(state_label, language)

        return text.strip()

    except Exception as e:
        logger.error(f"Gemini error for {state_label}: {str(e)}")
        return fallback_phrase(state_label, language)


class MessageGenerator:
    """Callable wrapper so the dispatcher can hold one configured generator."""

    def __init__(self, language="ar", model=None):
        self.language = language
        self.model = model

    def __call__(self, state_label):
        return get_intervention(state_label, self.language, model=self.model)

    @classmethod
    def from_config(cls, config):
        model = init_gemini_model(config.get("GEMINI_API_KEY"), config.get("GEMINI_MODEL", "gemini-2.0-flash"))
        return cls(language=config.get("LANGUAGE", "ar"), model=model)
