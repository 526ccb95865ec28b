# ABOUTME: Conversion orchestrator tying the Atom reader to the OPML writer.
# ABOUTME: Owns the single error surface and the async file/upload/URL entry points.

from pathlib import Path, PurePosixPath
from xml.etree import ElementTree

import structlog

from atom2opml.config import Settings
from atom2opml.errors import ConversionError, InputAcquisitionError, MalformedInputError
from atom2opml.models import ConversionResult
from atom2opml.services.atom import parse_atom_feed
from atom2opml.services.fetcher import check_feed_size, fetch_feed, read_feed_file
from atom2opml.services.opml import render_opml

log = structlog.get_logger()

DEFAULT_FILENAME = "feed"


class WriterInvariantError(RuntimeError):
    """Writer produced output that is not a well-formed OPML document."""


def opml_filename(source_name: str | None) -> str:
    """Derive the download name: input file stem plus .opml, or feed.opml."""
    stem = ""
    if source_name:
        name = PurePosixPath(source_name.replace("\\", "/")).name
        stem = name.rsplit(".", 1)[0] if "." in name[1:] else name
    return f"{stem.strip() or DEFAULT_FILENAME}.opml"


def _check_output(opml: str) -> None:
    try:
        root = ElementTree.fromstring(opml)  # noqa: S314
    except ElementTree.ParseError as e:
        raise WriterInvariantError(f"rendered OPML does not parse: {e}") from e
    if root.tag != "opml":
        raise WriterInvariantError(f"rendered OPML has root <{root.tag}>")


def convert(raw_atom: str | bytes) -> str:
    """Convert Atom text to an OPML 1.0 string.

    Raises ConversionError wrapping MalformedInputError for bad input, or a
    WriterInvariantError if the rendered document fails to re-parse.
    """
    try:
        feed = parse_atom_feed(raw_atom)
        opml = render_opml(feed)
        _check_output(opml)
    except MalformedInputError as e:
        log.warning("conversion_failed", reason=e.reason)
        raise ConversionError(e) from e
    except WriterInvariantError as e:
        log.error("conversion_failed", error=str(e))
        raise ConversionError(e) from e

    log.info("conversion_complete", title=feed.title, self_link=feed.self_link)
    return opml


def _convert_acquired(raw: bytes, source_name: str | None) -> ConversionResult:
    return ConversionResult(opml=convert(raw), filename=opml_filename(source_name))


async def convert_file(path: Path | str, settings: Settings | None = None) -> ConversionResult:
    """Read a local Atom file and convert it."""
    try:
        raw = await read_feed_file(path, settings)
    except InputAcquisitionError as e:
        raise ConversionError(e) from e
    return _convert_acquired(raw, Path(path).name)


async def convert_upload(
    content: bytes, filename: str | None = None, settings: Settings | None = None
) -> ConversionResult:
    """Convert uploaded Atom bytes, naming the result after the upload."""
    try:
        raw = check_feed_size(content, settings, source=filename)
    except InputAcquisitionError as e:
        raise ConversionError(e) from e
    return _convert_acquired(raw, filename)


async def convert_url(url: str, settings: Settings | None = None) -> ConversionResult:
    """Fetch an Atom feed over HTTP and convert it."""
    try:
        raw = await fetch_feed(url, settings)
    except InputAcquisitionError as e:
        raise ConversionError(e) from e
    return _convert_acquired(raw, None)
