# ABOUTME: OPML 1.0 writer and reader.
# ABOUTME: Maps a FeedRecord to a canonical single-outline OPML document and reads outlines back.

from xml.etree import ElementTree
from xml.sax.saxutils import escape

import structlog

from atom2opml.errors import MalformedInputError
from atom2opml.models import FeedRecord, OpmlDocument, OutlineRecord

log = structlog.get_logger()

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
OPML_VERSION = "1.0"

TEXT_ENTITIES = {'"': "&quot;"}
# Whitespace characters are referenced so attribute normalization keeps them
ATTRIBUTE_ENTITIES = {**TEXT_ENTITIES, "\t": "&#9;", "\n": "&#10;", "\r": "&#13;"}


def build_opml_document(feed: FeedRecord) -> OpmlDocument:
    """Map a feed record to a one-outline OPML document."""
    outline = OutlineRecord(text=feed.title, title=feed.title, xml_url=feed.self_link)
    return OpmlDocument(head_title=feed.title, outlines=(outline,))


def _attr(value: str) -> str:
    return escape(value, ATTRIBUTE_ENTITIES)


def _render_outline(outline: OutlineRecord) -> str:
    attrs = [("text", outline.text), ("title", outline.title)]
    if outline.xml_url is not None:
        attrs.append(("xmlUrl", outline.xml_url))
    attrs.append(("type", outline.type))

    rendered = " ".join(f'{name}="{_attr(value)}"' for name, value in attrs)
    return f"<outline {rendered} />"


def serialize_opml(document: OpmlDocument) -> str:
    """Serialize an OPML document with fixed attribute order and no timestamps."""
    outlines = "".join(_render_outline(o) for o in document.outlines)
    return (
        f"{XML_DECLARATION}\n"
        f'<opml version="{OPML_VERSION}">'
        f"<head><title>{escape(document.head_title, TEXT_ENTITIES)}</title></head>"
        f"<body>{outlines}</body>"
        "</opml>"
    )


def render_opml(feed: FeedRecord) -> str:
    """Render a feed record as an OPML 1.0 string."""
    return serialize_opml(build_opml_document(feed))


def parse_opml(content: str) -> list[OutlineRecord]:
    """Parse OPML content and extract feed outlines.

    Outlines without an xmlUrl (folders) are skipped. Raises
    MalformedInputError on invalid XML.
    """
    try:
        root = ElementTree.fromstring(content)  # noqa: S314
    except ElementTree.ParseError as e:
        log.error("opml_parse_error", error=str(e))
        raise MalformedInputError("not well-formed XML", str(e)) from e

    outlines: list[OutlineRecord] = []
    for outline in root.iter("outline"):
        xml_url = outline.get("xmlUrl")
        if not xml_url:
            continue

        name = outline.get("title") or outline.get("text") or xml_url
        outlines.append(OutlineRecord(text=outline.get("text") or name, title=name, xml_url=xml_url))

    log.debug("opml_parsed", count=len(outlines))
    return outlines
