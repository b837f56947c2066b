import vertexai
from vertexai.generative_models import GenerativeModel
import logging
from typing import Any, Optional

from wanderwise.utils.errors import UpstreamCallFailed

class VertexAIService:
    """Thin client around Gemini: one prompt in, raw text out.

    No retries and no timeout override; whatever the SDK transport does is
    what the caller gets. Pass ``model`` to reuse an existing (or fake)
    ``GenerativeModel`` instead of initializing the SDK.
    """

    def __init__(
        self,
        project_id: str,
        location: str = "us-central1",
        model_name: str = "gemini-2.5-flash",
        temperature: float = 0.7,
        model: Optional[Any] = None,
    ):
        self.project_id = project_id
        self.location = location
        self.model_name = model_name
        self.temperature = temperature
        self.logger = logging.getLogger(__name__)

        if model is not None:
            self.model = model
            return

        # Initialize Vertex AI
        try:
            vertexai.init(project=project_id, location=location)
            self.model = GenerativeModel(model_name)
            self.logger.info(f"Vertex AI initialized successfully for project {project_id}")
        except Exception as e:
            self.logger.error(f"Failed to initialize Vertex AI: {str(e)}")
            raise

    def generate_text(self, prompt: str) -> str:
        """Send a single prompt and return the model's raw text.

        Raises:
            UpstreamCallFailed: if the SDK call itself raises
        """
        self.logger.debug("[vertex] generate_text called", extra={"prompt_len": len(prompt)})
        try:
            response = self.model.generate_content(
                [prompt],
                generation_config={
                    "temperature": self.temperature,
                    "response_mime_type": "application/json",
                    "candidate_count": 1,
                }
            )
        except Exception as e:
            self.logger.error(f"[vertex] generate_content failed: {e}", exc_info=True)
            raise UpstreamCallFailed("Failed to fetch generated content") from e

        text = self._extract_response_text(response)
        self.logger.info("[vertex] model response received", extra={"length": len(text)})
        self.logger.debug("[vertex] raw response text\n%s", text)
        return text

    def _extract_response_text(self, response: Any) -> str:
        """Extract text from a Vertex AI response, joining multi-part candidates."""
        # ``response.text`` raises when the candidate has several parts
        try:
            text_attr = getattr(response, "text", None)
        except ValueError:
            text_attr = None
        if isinstance(text_attr, str) and text_attr.strip():
            return text_attr

        parts_text: list[str] = []
        for cand in getattr(response, "candidates", []) or []:
            content = getattr(cand, "content", None)
            for part in getattr(content, "parts", []) or []:
                t = getattr(part, "text", None)
                if t:
                    parts_text.append(t)
        result = "\n".join(parts_text).strip()
        if not result:
            self.logger.warning("[vertex] Empty response from model")
        return result
