# ABOUTME: FastAPI route handlers for the conversion web UI.
# ABOUTME: Serves the upload form and returns converted OPML as a file download.

from urllib.parse import quote

import structlog
from fastapi import APIRouter, Form, Request, UploadFile
from fastapi.responses import HTMLResponse, JSONResponse, Response

from atom2opml.errors import ConversionError, InputAcquisitionError, MalformedInputError
from atom2opml.models import ConversionResult
from atom2opml.services.converter import convert_upload, convert_url

log = structlog.get_logger()
router = APIRouter()


def content_disposition(filename: str) -> str:
    """Build an RFC 6266 attachment header with an ASCII fallback name."""
    cleaned = "".join(ch for ch in filename if ch.isprintable() and ch not in '"\\')
    fallback = cleaned.encode("ascii", "replace").decode("ascii").replace("?", "_")
    header = f'attachment; filename="{fallback}"'
    if fallback != cleaned:
        header += f"; filename*=UTF-8''{quote(cleaned, safe='')}"
    return header


def _download_response(result: ConversionResult) -> Response:
    return Response(
        content=result.opml,
        media_type=result.media_type,
        headers={"Content-Disposition": content_disposition(result.filename)},
    )


def _error_response(error: ConversionError) -> JSONResponse:
    """Map a conversion failure to an HTTP status."""
    if isinstance(error.cause, MalformedInputError):
        status_code = 422
    elif isinstance(error.cause, InputAcquisitionError):
        status_code = 502
    else:
        status_code = 500
    log.warning("conversion_rejected", status=status_code, error=str(error))
    return JSONResponse({"detail": error.user_message}, status_code=status_code)


@router.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Upload / URL form."""
    templates = request.app.state.templates
    return templates.TemplateResponse(request, "index.html", {})


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.post("/convert/file")
async def convert_file_upload(feed_file: UploadFile):
    """Convert an uploaded Atom file."""
    content = await feed_file.read()
    try:
        result = await convert_upload(content, feed_file.filename)
    except ConversionError as e:
        return _error_response(e)

    log.info("file_converted", filename=feed_file.filename, output=result.filename)
    return _download_response(result)


@router.post("/convert/url")
async def convert_remote_feed(url: str = Form(...)):
    """Fetch an Atom feed from a URL and convert it."""
    try:
        result = await convert_url(url.strip())
    except ConversionError as e:
        return _error_response(e)

    log.info("url_converted", url=url, output=result.filename)
    return _download_response(result)
