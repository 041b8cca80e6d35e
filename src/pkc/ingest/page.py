"""Fetch a web page and convert it to Markdown."""

import asyncio
import re
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup, Comment, Doctype, NavigableString, Tag

from ..errors import ContentFetchError
from ..models import PageContent
from .transcript import fetch_transcript, is_video_url

USER_AGENT = "Mozilla/5.0 (compatible; pkc/0.1)"

STRIP_TAGS = ["script", "style", "nav", "footer", "header", "noscript", "form", "iframe", "svg"]
BLOCK_TAGS = {"p", "div", "section", "article", "main", "figure", "figcaption", "table", "tr", "dl", "dd", "dt"}


def _inline(node, base_url: str) -> str:
    """Render inline content (text, links, emphasis, code)."""
    if isinstance(node, (Comment, Doctype)):
        return ""
    if isinstance(node, NavigableString):
        return re.sub(r"\s+", " ", str(node))
    if not isinstance(node, Tag):
        return ""

    inner = "".join(_inline(child, base_url) for child in node.children)
    name = node.name
    if name == "a":
        href = node.get("href")
        text = inner.strip()
        if href and text and not href.startswith(("javascript:", "#")):
            return f"[{text}]({urljoin(base_url, href)})"
        return inner
    if name in ("strong", "b"):
        return f"**{inner.strip()}**" if inner.strip() else ""
    if name in ("em", "i"):
        return f"*{inner.strip()}*" if inner.strip() else ""
    if name == "code":
        return f"`{node.get_text()}`"
    if name == "br":
        return "\n"
    if name == "img":
        alt = node.get("alt", "").strip()
        src = node.get("src")
        return f"![{alt}]({urljoin(base_url, src)})" if src else ""
    return inner


def _blocks(node: Tag, base_url: str, out: list[str]) -> None:
    """Append Markdown blocks for ``node``'s children to ``out``."""
    buffer: list[str] = []

    def flush():
        text = "".join(buffer).strip()
        if text:
            out.append(text)
        buffer.clear()

    for child in node.children:
        if isinstance(child, NavigableString):
            buffer.append(_inline(child, base_url))
            continue
        if not isinstance(child, Tag):
            continue

        name = child.name
        if re.fullmatch(r"h[1-6]", name):
            flush()
            text = _inline(child, base_url).strip()
            if text:
                out.append(f"{'#' * int(name[1])} {text}")
        elif name in ("ul", "ol"):
            flush()
            items = []
            for i, li in enumerate(child.find_all("li", recursive=False), 1):
                marker = f"{i}." if name == "ol" else "-"
                text = _inline(li, base_url).strip()
                if text:
                    items.append(f"{marker} {text}")
            if items:
                out.append("\n".join(items))
        elif name == "pre":
            flush()
            out.append(f"```\n{child.get_text().rstrip()}\n```")
        elif name == "blockquote":
            flush()
            quoted: list[str] = []
            _blocks(child, base_url, quoted)
            if quoted:
                out.append("\n".join(f"> {line}" for line in "\n\n".join(quoted).splitlines()))
        elif name == "hr":
            flush()
            out.append("---")
        elif name in BLOCK_TAGS or child.find(["p", "h1", "h2", "h3", "ul", "ol", "pre", "div"]):
            flush()
            _blocks(child, base_url, out)
        else:
            buffer.append(_inline(child, base_url))
    flush()


def html_to_markdown(html: str, base_url: str = "") -> str:
    """Convert an HTML document to readable Markdown."""
    soup = BeautifulSoup(html, "lxml")

    for tag in soup(STRIP_TAGS):
        tag.decompose()

    root = soup.find("article") or soup.find("main") or soup.body or soup
    blocks: list[str] = []
    _blocks(root, base_url, blocks)

    markdown = "\n\n".join(blocks)
    return re.sub(r"\n{3,}", "\n\n", markdown).strip()


async def url_to_markdown(url: str, timeout: float = 20.0) -> str:
    """Download ``url`` and return its content as Markdown."""
    try:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
            resp = await client.get(url, headers={"User-Agent": USER_AGENT})
            resp.raise_for_status()
    except httpx.HTTPError as e:
        raise ContentFetchError(f"Failed to fetch {url}: {e}") from e
    return html_to_markdown(resp.text, base_url=str(resp.url))


async def fetch_page_content(url: str, timeout: float = 20.0) -> PageContent:
    """Transcript for video URLs, Markdown for anything else."""
    if is_video_url(url):
        body = await asyncio.to_thread(fetch_transcript, url)
        return PageContent(body=body, kind="transcript")
    return PageContent(body=await url_to_markdown(url, timeout=timeout), kind="page")
