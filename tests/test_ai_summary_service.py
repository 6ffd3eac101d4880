from types import SimpleNamespace

import openai
import pytest

from config import Settings
from services.ai_summary_service import SummaryError, SummaryService


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _service(completions):
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return SummaryService(Settings(openai_model="gpt-test"), client=client)


def test_summarize_returns_stripped_text():
    completions = FakeCompletions(content="  Tubo de inserção danificado.  ")
    summary = _service(completions).summarize("Vazamento", "Tubos e Canais: Troca")
    assert summary == "Tubo de inserção danificado."
    assert completions.kwargs["model"] == "gpt-test"
    user_message = completions.kwargs["messages"][-1]["content"]
    assert "Vazamento" in user_message
    assert "Tubos e Canais: Troca" in user_message


def test_backend_error_becomes_summary_error():
    completions = FakeCompletions(error=openai.OpenAIError("quota"))
    with pytest.raises(SummaryError):
        _service(completions).summarize("a", "b")


def test_missing_api_key():
    with pytest.raises(SummaryError):
        SummaryService(Settings(openai_api_key=None)).summarize("a", "b")
