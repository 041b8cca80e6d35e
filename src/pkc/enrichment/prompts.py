"""Prompt templates for Claude API summaries."""

SUMMARY_PROMPT = """Summarize the following web page or video transcript for a personal knowledge base.

Start with a one-sentence overview, then list the key points as Markdown bullets.
Keep names, numbers and definitions exact. Do not add information that is not in the text.
Respond with the summary only, no preamble.

Content:
"""
