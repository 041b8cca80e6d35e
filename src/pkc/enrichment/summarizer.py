"""Claude-generated summaries of captured page content."""

from typing import Any

from .prompts import SUMMARY_PROMPT


class Summarizer:
    """Summarizes page bodies using Claude API."""

    def __init__(self, config: dict[str, Any]):
        api_key = config.get("claude_api_key")
        if not api_key:
            raise ValueError("Claude API key required for summaries. Set ANTHROPIC_API_KEY or claude_api_key in config.")

        import anthropic
        self.client = anthropic.Anthropic(api_key=api_key)
        self.model = config.get("claude_model", "claude-sonnet-4-20250514")

    def summarize(self, page_body: str) -> str:
        """Return a Markdown summary, or an empty string for an empty body."""
        if not page_body.strip():
            return ""

        response = self.client.messages.create(
            model=self.model,
            max_tokens=1500,
            messages=[{"role": "user", "content": SUMMARY_PROMPT + page_body}],
        )
        return "".join(block.text for block in response.content if block.type == "text").strip()


def get_summarizer(config: dict[str, Any]) -> Summarizer | None:
    """A summarizer when an API key is configured, else None."""
    try:
        return Summarizer(config)
    except ValueError:
        return None
