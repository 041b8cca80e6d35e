"""Markdown templates for captured notes."""

from datetime import datetime

from ..models import CaptureDraft


def render_timestamp(now: datetime) -> str:
    """Heading that opens every capture, e.g. ``## 05/01/24: 09:03:07``."""
    return now.strftime("## %d/%m/%y: %H:%M:%S")


def render_callout(kind: str, label: str, text: str) -> str:
    return f"> [!{kind}] {label}\n{text}"


def render_source(url: str, label: str) -> str:
    return f"Source: [{label}]({url})"


def render_summary(summary: str) -> str:
    return f"---\n\n{summary}\n\n---"


def compose(draft: CaptureDraft, now: datetime) -> str:
    """Compose the note body for a draft.

    Sections appear in a fixed order and are separated by a blank line:
    timestamp, highlight quote, note, source link, summary, page body.
    Sections whose inclusion rule fails are left out entirely.
    """
    sections = [render_timestamp(now)]

    if draft.include_highlight and draft.highlight_text:
        sections.append(render_callout("quote", "Quote", draft.highlight_text))

    if draft.note_text and draft.note_text.strip():
        sections.append(render_callout("note", "Note", draft.note_text))

    if draft.source is not None and draft.source.url:
        sections.append(render_source(draft.source.url, draft.source.display_label))

    if draft.include_summary and draft.summary_text:
        sections.append(render_summary(draft.summary_text))

    if draft.include_page_body and draft.page_body:
        sections.append(draft.page_body)

    return "\n\n".join(sections)
