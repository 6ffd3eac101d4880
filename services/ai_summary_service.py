import logging
from dataclasses import dataclass

import openai

from config import Settings

logger = logging.getLogger(__name__)

SUMMARY_PROMPT = (
    "You are an AI assistant that summarizes service orders of an endoscope "
    "repair shop. Summarize the key details from the technician's notes and "
    "inspection checklist provided by the user. Focus on important findings "
    "and the overall status of the service order. Answer in Portuguese."
)


class SummaryError(RuntimeError):
    """The summarization backend could not produce a summary."""


@dataclass
class SummaryService:
    settings: Settings
    client: openai.OpenAI | None = None

    def _client(self) -> openai.OpenAI:
        if self.client is None:
            if not self.settings.openai_api_key:
                raise SummaryError("OPENAI_API_KEY is not set")
            self.client = openai.OpenAI(
                api_key=self.settings.openai_api_key,
                base_url=self.settings.openai_base_url,
            )
        return self.client

    def summarize(self, technician_notes: str, inspection_checklist: str) -> str:
        """Return a short report for the given notes and checklist text."""
        messages = [
            {"role": "system", "content": SUMMARY_PROMPT},
            {
                "role": "user",
                "content": (
                    f"Technician Notes: {technician_notes or '-'}\n\n"
                    f"Inspection Checklist: {inspection_checklist or '-'}"
                ),
            },
        ]
        try:
            resp = self._client().chat.completions.create(
                model=self.settings.openai_model,
                messages=messages,
                temperature=0,
            )
        except openai.OpenAIError as exc:
            logger.error("OpenAI request failed: %s", exc)
            raise SummaryError(f"OpenAI request failed: {exc}") from exc

        content = resp.choices[0].message.content or ""
        return content.strip()
