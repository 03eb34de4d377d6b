from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ImportResponse(BaseModel):
    """Normalised article returned to the caller (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    html_content: str
    text_content: str
    length: int
    source_url: str


class ErrorResponse(BaseModel):
    error: str
