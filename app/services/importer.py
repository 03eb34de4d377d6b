"""Import pipeline: guard → fetch → decode → extract → normalise.

Each stage runs only after the previous one has finished and hands its result
to the next by value; nothing is shared between concurrent imports.
"""

import logging
from typing import Optional

import httpx

from app.config import FetchLimits
from app.models.import_response import ImportResponse
from app.services.encoding import decode_document
from app.services.errors import ExtractionFailedError
from app.services.extractor import extract_article
from app.services.fetcher import fetch_url
from app.services.guard import Resolver
from app.services.normalizer import html_to_text

logger = logging.getLogger(__name__)


async def import_article(
    url: str,
    limits: FetchLimits = FetchLimits(),
    *,
    resolver: Optional[Resolver] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ImportResponse:
    """Fetch *url* and return its article as normalised plain text.

    Raises:
        ImportFailure: any subclass raised by the fetch stage, or
            ExtractionFailedError when the page holds no readable article.
    """
    result = await fetch_url(url, limits, resolver=resolver, transport=transport)
    logger.info(
        "Fetched %d bytes", result.byte_length, extra={"url": url, "final_url": result.final_url}
    )

    document = decode_document(result.raw_bytes, result.final_url)

    article = extract_article(document.text, document.source_url)
    if article is None:
        raise ExtractionFailedError(f"No readable article found at {result.final_url}.")

    text = html_to_text(article.content_html)
    return ImportResponse(
        title=article.title or "",
        html_content=article.content_html,
        text_content=text,
        length=len(text),
        source_url=url,
    )
