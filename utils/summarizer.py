import logging
from typing import Optional

from langchain_openai import ChatOpenAI
from langchain_core.messages import HumanMessage, SystemMessage
import google.generativeai as genai

from utils import config

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are an expert summarizer of workplace incident reports."

SUMMARY_PROMPT = """Please provide a concise summary of the following incident report.
Keep it to two or three sentences and mention the hazard, the location and any injury or damage.

{incident_report}"""


class SummarizerUnavailable(RuntimeError):
    """No summarization model is configured."""


class SummarizerError(RuntimeError):
    """The summarization provider failed."""


class IncidentSummarizer:
    def __init__(self, openai_api_key: Optional[str] = None, gemini_api_key: Optional[str] = None):
        self.openai_api_key = openai_api_key if openai_api_key is not None else config.OPENAI_API_KEY
        self.gemini_api_key = gemini_api_key if gemini_api_key is not None else config.GEMINI_API_KEY

        # Initialize AI models with fallback options
        self.llm = None
        self.gemini_model = None

        # Try OpenAI first
        if self.openai_api_key:
            try:
                self.llm = ChatOpenAI(
                    model=config.OPENAI_MODEL,
                    temperature=0.2,
                    api_key=self.openai_api_key
                )
                logger.info("Using OpenAI for incident summaries")
            except Exception as e:
                logger.error(f"Error initializing OpenAI for incident summaries: {e}")

        # Try Gemini as fallback
        if not self.llm and self.gemini_api_key:
            try:
                genai.configure(api_key=self.gemini_api_key)
                self.gemini_model = genai.GenerativeModel(config.GEMINI_MODEL)
                logger.info("Using Gemini for incident summaries")
            except Exception as e:
                logger.error(f"Error initializing Gemini for incident summaries: {e}")

    @property
    def available(self) -> bool:
        return self.llm is not None or self.gemini_model is not None

    def summarize(self, text: str) -> str:
        """
        Summarize free text.

        Raises:
            SummarizerUnavailable: If neither provider is configured
            SummarizerError: If the provider call fails or returns nothing
        """
        if not self.available:
            raise SummarizerUnavailable("No summarization model configured")

        prompt = SUMMARY_PROMPT.format(incident_report=text)
        try:
            if self.llm:
                messages = [
                    SystemMessage(content=SYSTEM_PROMPT),
                    HumanMessage(content=prompt)
                ]
                response = self.llm.invoke(messages)
                summary = response.content
            else:
                response = self.gemini_model.generate_content(f"{SYSTEM_PROMPT}\n\n{prompt}")
                summary = response.text
        except Exception as e:
            logger.error(f"Summarization request failed: {e}")
            raise SummarizerError("Failed to generate summary.") from e

        summary = (summary or "").strip()
        if not summary:
            raise SummarizerError("Failed to generate summary.")
        return summary


_summarizer: Optional[IncidentSummarizer] = None


def get_summarizer() -> IncidentSummarizer:
    """Dependency returning the process-wide summarizer."""
    global _summarizer
    if _summarizer is None:
        _summarizer = IncidentSummarizer()
    return _summarizer
