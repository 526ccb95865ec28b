# ABOUTME: Streaming Atom feed reader.
# ABOUTME: Extracts the feed-level title and self link, releasing entries unread.

import codecs
from xml.etree import ElementTree

import structlog

from atom2opml.errors import MalformedInputError
from atom2opml.models import FeedRecord

log = structlog.get_logger()

ATOM_NAMESPACES = ("http://www.w3.org/2005/Atom", "http://purl.org/atom/ns#")
CHUNK_SIZE = 64 * 1024


def _atom_tags(name: str) -> frozenset[str]:
    return frozenset([name, *(f"{{{ns}}}{name}" for ns in ATOM_NAMESPACES)])


FEED_TAGS = _atom_tags("feed")
TITLE_TAGS = _atom_tags("title")
LINK_TAGS = _atom_tags("link")


def parse_atom_feed(raw: str | bytes) -> FeedRecord:
    """Parse Atom XML into a FeedRecord.

    Only direct children of <feed> are considered. Each child is dropped from
    the tree as soon as it closes, so <entry> elements cost one pass of the
    tokenizer and nothing more.

    Raises MalformedInputError if the input is not well-formed XML or the root
    element is not an Atom <feed>.
    """
    if isinstance(raw, str):
        raw = raw.lstrip("\ufeff \t\r\n")
    else:
        raw = raw.removeprefix(codecs.BOM_UTF8).lstrip(b" \t\r\n")

    parser = ElementTree.XMLPullParser(events=("start", "end"))  # noqa: S314
    root: ElementTree.Element | None = None
    depth = 0
    title: str | None = None
    links: list[dict[str, str]] = []

    try:
        for offset in range(0, max(len(raw), 1), CHUNK_SIZE):
            parser.feed(raw[offset : offset + CHUNK_SIZE])
            for event, elem in parser.read_events():
                if event == "start":
                    if root is None:
                        if elem.tag not in FEED_TAGS:
                            log.warning("atom_not_a_feed", root=elem.tag)
                            raise MalformedInputError("missing <feed> root element")
                        root = elem
                    depth += 1
                    continue

                depth -= 1
                if depth != 1:
                    continue

                # Direct child of <feed> just closed
                if elem.tag in TITLE_TAGS and title is None:
                    title = "".join(elem.itertext()).strip()
                elif elem.tag in LINK_TAGS:
                    links.append(dict(elem.attrib))
                root.remove(elem)
        parser.close()
    except ElementTree.ParseError as e:
        log.warning("atom_parse_error", error=str(e))
        raise MalformedInputError("not well-formed XML", str(e)) from e

    if root is None:
        raise MalformedInputError("missing <feed> root element")

    record = FeedRecord(title=title or "", self_link=_select_self_link(links))
    log.debug("atom_parsed", title=record.title, self_link=record.self_link)
    return record


def _select_self_link(links: list[dict[str, str]]) -> str | None:
    """Prefer rel="self", then the first alternate or unmarked link."""
    usable = [link for link in links if link.get("href", "").strip()]

    for link in usable:
        if link.get("rel") == "self":
            return link["href"].strip()

    for link in usable:
        if link.get("rel") in (None, "alternate"):
            return link["href"].strip()

    return None
