from pydantic import BaseModel


class ImportRequest(BaseModel):
    url: str
    """Target URL.  Kept as a plain string: scheme and host checks happen in the
    SSRF guard so that a malformed URL is reported as ``400 Invalid URL``."""
