import asyncio
import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable
from urllib import error, request
from urllib.parse import urlsplit

from bs4 import BeautifulSoup

from app.utils.logging import get_logger
from app.utils.normalize import clamp_text, collapse_whitespace

log = get_logger("services.context_fetcher")

ALLOWED_LESSON_HOST = "learnenglish.britishcouncil.org"
FETCH_TIMEOUT_SECONDS = 10.0
MAX_PAGE_BYTES = 1024 * 1024
MAX_FIELD_CHARS = 300
USER_AGENT = "tutor-relay/1.0 (+lesson-context)"

FetchHtml = Callable[[str], str]


@dataclass(frozen=True)
class LessonContext:
    ok: bool
    title: str | None = None
    description: str | None = None
    reason: str | None = None


LessonContextFetcher = Callable[[str], Awaitable[LessonContext]]


def is_allowed_lesson_url(url: str) -> bool:
    try:
        parts = urlsplit(url.strip())
        port = parts.port
    except (AttributeError, ValueError):
        return False
    if parts.scheme != "https":
        return False
    if parts.username is not None or parts.password is not None:
        return False
    if port not in (None, 443):
        return False
    return (parts.hostname or "").lower() == ALLOWED_LESSON_HOST


class _RefuseRedirects(request.HTTPRedirectHandler):
    def redirect_request(self, req, fp, code, msg, headers, newurl):
        return None


_opener = request.build_opener(_RefuseRedirects)


def _fetch_html(url: str) -> str:
    req = request.Request(url, headers={"User-Agent": USER_AGENT, "Accept": "text/html"}, method="GET")
    with _opener.open(req, timeout=FETCH_TIMEOUT_SECONDS) as response:
        if response.status != 200:
            raise error.URLError(f"unexpected status {response.status}")
        charset = response.headers.get_content_charset() or "utf-8"
        return response.read(MAX_PAGE_BYTES).decode(charset, errors="replace")


def _clean(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    text = collapse_whitespace(value)
    return clamp_text(text, MAX_FIELD_CHARS) if text else None


def _json_ld_nodes(soup: BeautifulSoup) -> list[dict[str, Any]]:
    nodes: list[dict[str, Any]] = []
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        try:
            data = json.loads(script.string or "")
        except (TypeError, ValueError):
            continue
        pending = data if isinstance(data, list) else [data]
        while pending:
            item = pending.pop(0)
            if not isinstance(item, dict):
                continue
            nodes.append(item)
            graph = item.get("@graph")
            if isinstance(graph, list):
                pending.extend(graph)
    return nodes


def _meta(soup: BeautifulSoup, *, attr: str, names: tuple[str, ...]) -> str | None:
    for name in names:
        tag = soup.find("meta", attrs={attr: name})
        if tag is not None:
            value = _clean(tag.get("content"))
            if value:
                return value
    return None


def extract_lesson_metadata(html: str) -> tuple[str | None, str | None]:
    """Title and description, preferring JSON-LD, then social tags, then plain meta, then <title>."""
    soup = BeautifulSoup(html, "html.parser")
    nodes = _json_ld_nodes(soup)

    title_candidates = [
        *(_clean(node.get("name")) or _clean(node.get("headline")) for node in nodes),
        _meta(soup, attr="property", names=("og:title",)),
        _meta(soup, attr="name", names=("twitter:title",)),
        _meta(soup, attr="name", names=("title",)),
        _clean(soup.title.string) if soup.title is not None else None,
    ]
    description_candidates = [
        *(_clean(node.get("description")) for node in nodes),
        _meta(soup, attr="property", names=("og:description",)),
        _meta(soup, attr="name", names=("twitter:description",)),
        _meta(soup, attr="name", names=("description",)),
    ]
    title = next((value for value in title_candidates if value), None)
    description = next((value for value in description_candidates if value), None)
    return title, description


async def fetch_lesson_context(
    url: str,
    *,
    fetch_html: FetchHtml | None = None,
    timeout: float = FETCH_TIMEOUT_SECONDS,
) -> LessonContext:
    if not is_allowed_lesson_url(url):
        log.info("Lesson URL rejected: %s", url[:200])
        return LessonContext(ok=False, reason="invalid_url")

    fetch = fetch_html or _fetch_html
    try:
        html = await asyncio.wait_for(asyncio.to_thread(fetch, url), timeout=timeout)
        title, description = extract_lesson_metadata(html)
    except Exception as exc:
        log.info("Lesson context fetch failed for %s: %s", url, exc)
        return LessonContext(ok=False, reason="fetch_failed")

    if not title and not description:
        return LessonContext(ok=False, reason="no_metadata")
    return LessonContext(ok=True, title=title, description=description)


def get_lesson_context_fetcher() -> LessonContextFetcher:
    return fetch_lesson_context
