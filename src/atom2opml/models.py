# ABOUTME: Pydantic schemas for the conversion pipeline.
# ABOUTME: Defines the feed record, OPML outline/document, and conversion result.

from typing import Literal

from pydantic import BaseModel, ConfigDict

OPML_MEDIA_TYPE = "application/xml"


class FeedRecord(BaseModel):
    """Feed-level metadata extracted from an Atom document."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    self_link: str | None = None


class OutlineRecord(BaseModel):
    """A single subscription outline in an OPML body."""

    model_config = ConfigDict(frozen=True)

    text: str
    title: str
    xml_url: str | None = None
    type: Literal["rss"] = "rss"


class OpmlDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    head_title: str
    outlines: tuple[OutlineRecord, ...]


class ConversionResult(BaseModel):
    """Rendered OPML plus what a caller needs to offer it as a download."""

    model_config = ConfigDict(frozen=True)

    opml: str
    filename: str
    media_type: str = OPML_MEDIA_TYPE
