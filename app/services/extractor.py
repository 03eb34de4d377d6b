import logging
from collections import defaultdict
from typing import Dict, NamedTuple, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from app.services.sanitizer import sanitize

logger = logging.getLogger(__name__)

# Paragraphs shorter than this are usually captions, bylines or buttons
_MIN_PARAGRAPH_CHARS = 25

_CONTENT_SELECTORS = (
    "article",
    "main",
    '[role="main"]',
    '[itemprop="articleBody"]',
    ".entry-content",
    ".post-content",
    ".article-body",
)


class ExtractedArticle(NamedTuple):
    title: Optional[str]
    content_html: str


def _extract_title(soup: BeautifulSoup) -> Optional[str]:
    og_title = soup.find("meta", attrs={"property": "og:title"})
    if og_title and og_title.get("content"):
        return str(og_title["content"]).strip()
    title_tag = soup.find("title")
    if title_tag and title_tag.get_text(strip=True):
        return title_tag.get_text(strip=True)
    h1 = soup.find("h1")
    if h1 and h1.get_text(strip=True):
        return h1.get_text(strip=True)
    return None


def _densest_paragraph_parent(soup: BeautifulSoup) -> Optional[Tag]:
    """Return the element whose direct ``<p>`` children hold the most text."""
    scores: Dict[int, int] = defaultdict(int)
    parents: Dict[int, Tag] = {}
    for p in soup.find_all("p"):
        length = len(p.get_text(strip=True))
        if length < _MIN_PARAGRAPH_CHARS or p.parent is None:
            continue
        scores[id(p.parent)] += length
        parents[id(p.parent)] = p.parent
    if not scores:
        return None
    # max() keeps the first of equal scores, so document order breaks ties.
    best = max(scores, key=lambda key: scores[key])
    return parents[best]


def _find_main_content(soup: BeautifulSoup) -> Optional[Tag]:
    """Return the most likely article element.

    Semantic containers are tried first; otherwise the element holding the
    largest amount of paragraph text wins.
    """
    for selector in _CONTENT_SELECTORS:
        node = soup.select_one(selector)
        if node and node.get_text(strip=True):
            return node
    return _densest_paragraph_parent(soup)


def _absolutize_links(node: Tag, base_url: str) -> None:
    for tag, attr in (("a", "href"), ("img", "src"), ("source", "src"), ("video", "src")):
        for element in node.find_all(tag, attrs={attr: True}):
            value = str(element[attr]).strip()
            if value and not value.startswith(("#", "javascript:", "mailto:", "tel:", "data:")):
                element[attr] = urljoin(base_url, value)


def extract_article(html: str, base_url: str) -> Optional[ExtractedArticle]:
    """Pick the main article out of *html*.

    Relative links in the content are resolved against *base_url*.  Returns
    ``None`` when no readable content is found, which is a normal outcome for
    login walls, navigation pages and empty documents.  The result depends
    only on the input, so the same page always yields the same article.
    """
    if not html.strip():
        return None

    # The title comes from the untouched page; <meta> and <title> are stripped by sanitize().
    title = _extract_title(BeautifulSoup(html, "lxml"))

    main_node = _find_main_content(sanitize(html))
    if main_node is None or not main_node.get_text(strip=True):
        logger.info("No article found at %s", base_url)
        return None

    _absolutize_links(main_node, base_url)
    return ExtractedArticle(title=title, content_html=str(main_node))
