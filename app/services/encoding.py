"""Character-encoding detection and decoding of fetched bodies."""

import codecs
import logging
from typing import NamedTuple, Tuple

from chardet import UniversalDetector

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"
_CHUNK_SIZE = 64 * 1024


class DecodedDocument(NamedTuple):
    text: str
    detected_encoding: str
    source_url: str


def detect_encoding(raw: bytes) -> str:
    """Guess the encoding of *raw*, falling back to UTF-8 when inconclusive."""
    detector = UniversalDetector()
    for start in range(0, len(raw), _CHUNK_SIZE):
        detector.feed(raw[start:start + _CHUNK_SIZE])
        if detector.done:
            break
    detector.close()

    encoding = detector.result.get("encoding")
    if not encoding:
        return DEFAULT_ENCODING
    try:
        return codecs.lookup(encoding).name
    except LookupError:
        logger.warning("Detected unknown encoding %r, using %s", encoding, DEFAULT_ENCODING)
        return DEFAULT_ENCODING


def decode_bytes(raw: bytes) -> Tuple[str, str]:
    """Return ``(text, encoding)``; malformed sequences become U+FFFD."""
    encoding = detect_encoding(raw)
    return raw.decode(encoding, errors="replace"), encoding


def decode_document(raw: bytes, source_url: str) -> DecodedDocument:
    text, encoding = decode_bytes(raw)
    logger.info("Detected encoding: %s", encoding, extra={"url": source_url})
    return DecodedDocument(text=text, detected_encoding=encoding, source_url=source_url)
