"""HTML-to-plain-text normalisation that keeps paragraph and line structure."""

import re

from bs4 import BeautifulSoup

_LINE_ENDINGS_RE = re.compile(r"\r\n|\r")
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")


def normalize_text(text: str) -> str:
    """Unify line endings to ``\\n`` and allow at most one blank line in a row.

    Idempotent: ``normalize_text(normalize_text(t)) == normalize_text(t)``.
    """
    text = _LINE_ENDINGS_RE.sub("\n", text)
    return _EXCESS_NEWLINES_RE.sub("\n\n", text)


def html_to_text(content_html: str) -> str:
    """Flatten an article HTML fragment into plain text.

    Each ``<br>`` becomes a newline and each ``<p>`` becomes its text followed
    by a blank line.  ``<br>`` elements are replaced first, so a paragraph's
    text already contains its line breaks when it is read.

    Entities are decoded, so the output is plain text and not HTML.  Feeding
    it back in is only a no-op when the text holds no ``<`` or ``&``: a
    decoded ``&lt;b&gt;`` re-parses as a tag on the second pass.  Use
    :func:`normalize_text` to re-normalise text that was already flattened.
    """
    # html.parser keeps bare top-level text as-is; lxml would wrap it in <p>.
    soup = BeautifulSoup(content_html, "html.parser")

    for br in soup.find_all("br"):
        br.replace_with("\n")

    # Outer paragraphs come first, so a nested <p> is replaced inside an
    # already-detached parent and does not reach the output twice.
    for p in soup.find_all("p"):
        p.replace_with(p.get_text() + "\n\n")

    return normalize_text(soup.get_text())
