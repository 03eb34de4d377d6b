import re

from bs4 import BeautifulSoup, Comment, Tag

# Matches `display:none` or `visibility:hidden` in inline style attributes
_HIDDEN_STYLE_RE = re.compile(
    r"(display\s*:\s*none|visibility\s*:\s*hidden)", re.IGNORECASE
)

# Tags whose entire subtree is dropped before looking for the article
_REMOVE_TAGS = {
    "script",
    "style",
    "noscript",
    "iframe",
    "object",
    "embed",
    "applet",
    "link",
    "meta",
    "svg",
    "canvas",
    "template",
    "button",
    "input",
    "select",
    "textarea",
}

# Event handlers and inline CSS never belong in the returned article HTML
_JUNK_ATTRS = re.compile(r"^(style|on\w+)$", re.IGNORECASE)

# CSS classes / ids that strongly indicate boilerplate around the article
_NOISE_KEYWORDS = {
    "navbar",
    "navigation",
    "menu",
    "sidebar",
    "side-bar",
    "banner",
    "popup",
    "modal",
    "cookie",
    "gdpr",
    "advert",
    "tracking",
    "footer",
    "breadcrumb",
    "pagination",
    "social",
    "share",
    "related",
    "recommend",
    "subscribe",
    "newsletter",
    "promo",
    "overlay",
    "comment",
    "widget",
}

# Semantic elements that are boilerplate wherever they appear
_NOISE_TAGS = {"nav", "aside"}

# Site-level chrome when placed directly under <body>; kept inside an article
_PAGE_CHROME_TAGS = ["header", "footer"]


def _has_noise_attr(tag: Tag) -> bool:
    """Return True when a tag's id or class suggests it is not article content."""
    if not tag.attrs:
        return False
    attrs_to_check = []
    if tag.get("id"):
        attrs_to_check.append(str(tag["id"]).lower())
    for cls in tag.get("class", []):
        attrs_to_check.append(cls.lower())

    return any(keyword in attr for attr in attrs_to_check for keyword in _NOISE_KEYWORDS)


def sanitize(html: str) -> BeautifulSoup:
    """Strip scripting, hidden elements and page chrome from *html*.

    Returns the cleaned tree; the article body, if any, is what remains.
    """
    soup = BeautifulSoup(html, "lxml")

    for tag in soup.find_all(_REMOVE_TAGS | _NOISE_TAGS):
        if not tag.decomposed:
            tag.decompose()

    if soup.body is not None:
        for tag in soup.body.find_all(_PAGE_CHROME_TAGS, recursive=False):
            tag.decompose()

    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    for tag in soup.find_all(True):
        # Descendants of an element removed earlier in this loop
        if tag.decomposed:
            continue
        if tag.name in ("html", "body"):
            continue
        if _has_noise_attr(tag):
            tag.decompose()
            continue
        inline_style = tag.get("style", "")
        if inline_style and _HIDDEN_STYLE_RE.search(inline_style):
            tag.decompose()
            continue
        junk = [attr for attr in tag.attrs if _JUNK_ATTRS.match(attr)]
        for attr in junk:
            del tag[attr]

    return soup
