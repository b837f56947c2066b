import logging
from typing import Dict, Optional
import httpx

from wanderwise.models.response_models import TranslationResult

# Common traveler phrases served when the translation API is unreachable
FALLBACK_TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "ja": {
        "Hello, how are you?": "こんにちは、お元気ですか？",
        "Where is the nearest train station?": "最寄りの駅はどこですか？",
        "I would like to order this, please.": "これを注文したいです。",
        "How much does this cost?": "これはいくらですか？",
        "Can you help me?": "手伝ってもらえますか？",
        "Thank you very much.": "どうもありがとうございます。",
    },
    "es": {
        "Hello, how are you?": "Hola, ¿cómo estás?",
        "Where is the nearest train station?": "¿Dónde está la estación de tren más cercana?",
        "I would like to order this, please.": "Me gustaría ordenar esto, por favor.",
        "How much does this cost?": "¿Cuánto cuesta esto?",
        "Can you help me?": "¿Puede ayudarme?",
        "Thank you very much.": "Muchas gracias.",
    },
    "fr": {
        "Hello, how are you?": "Bonjour, comment allez-vous?",
        "Where is the nearest train station?": "Où est la gare la plus proche?",
        "I would like to order this, please.": "Je voudrais commander ceci, s'il vous plaît.",
        "How much does this cost?": "Combien ça coûte?",
        "Can you help me?": "Pouvez-vous m'aider?",
        "Thank you very much.": "Merci beaucoup.",
    },
}

FALLBACK_SOURCE_LANGUAGE = "en"
FALLBACK_NOTE = "Using fallback translation"

def unavailable_placeholder(text: str) -> str:
    return f'[Translation unavailable for "{text}"]'


class TranslationService:
    """
    Translate text through LibreTranslate.
    Upstream failures never reach the caller: they fall back to the phrase
    table, and failing that, to a placeholder string.
    """

    def __init__(self, api_url: str, api_key: Optional[str] = None,
                 client: Optional[httpx.Client] = None):
        self.api_url = api_url
        self.api_key = api_key
        self.logger = logging.getLogger(__name__)
        self.client = client or httpx.Client()

    def translate(self, text: str, target_language: str, source_language: Optional[str] = None) -> TranslationResult:
        source = source_language or "auto"
        payload = {
            "q": text,
            "source": source,
            "target": target_language,
            "format": "text",
        }
        if self.api_key:
            payload["api_key"] = self.api_key

        try:
            response = self.client.post(self.api_url, json=payload)
            response.raise_for_status()
            translated = response.json()["translatedText"]
            if not isinstance(translated, str):
                raise ValueError("translatedText is not a string")
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            self.logger.warning(
                "[translate] Translation API failed; using fallback",
                extra={"target": target_language, "error": str(e)}
            )
            return self.fallback(text, target_language)

        self.logger.info("[translate] Translated text", extra={"source": source, "target": target_language, "chars": len(text)})
        return TranslationResult(translated_text=translated, detected_source_language=source)

    @staticmethod
    def fallback(text: str, target_language: str) -> TranslationResult:
        """Exact-match phrase table lookup, else the unavailable placeholder"""
        phrase = FALLBACK_TRANSLATIONS.get(target_language, {}).get(text)
        if phrase is not None:
            return TranslationResult(
                translated_text=phrase,
                detected_source_language=FALLBACK_SOURCE_LANGUAGE,
                note=FALLBACK_NOTE,
            )
        return TranslationResult(
            translated_text=unavailable_placeholder(text),
            error="Translation failed",
        )

    def close(self):
        self.client.close()
