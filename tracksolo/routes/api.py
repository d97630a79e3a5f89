"""
Track Solo - JSON API Routes

Provides the REST API endpoints for:
- Processing an uploaded MIDI file into a ZIP of per-track variants
- Previewing an uploaded MIDI file (tracks and the files it would produce)
- Health check
"""

import json
import time
from urllib.parse import quote

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from loguru import logger

from tracksolo.config import (
    APP_VERSION,
    DEFAULT_VELOCITY_REDUCTION,
    MAX_UPLOAD_SIZE_BYTES,
    MAX_UPLOAD_SIZE_MB,
)
from tracksolo.errors import (
    ArchiveError,
    FormatError,
    InvalidAmountError,
    MissingExtensionError,
)
from tracksolo.models import InputFile
from tracksolo.services.processor import get_midi_summary, process_file
from tracksolo.services.velocity import validate_amount

router = APIRouter(prefix="/api", tags=["API"])

# Track startup time for health check
_START_TIME = time.time()

# Pipeline errors caused by the uploaded content rather than the server
_CLIENT_ERRORS = (MissingExtensionError, FormatError, InvalidAmountError)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@router.get("/health")
async def health_check():
    """Health check endpoint for the service."""
    uptime = round(time.time() - _START_TIME, 2)
    return {
        "status": "ok",
        "uptime_seconds": uptime,
        "version": APP_VERSION,
    }


# ---------------------------------------------------------------------------
# Upload helpers
# ---------------------------------------------------------------------------
async def read_upload(file: UploadFile) -> InputFile:
    """Buffer an upload in memory, enforcing the size limit."""
    filename = file.filename
    if not filename:
        raise HTTPException(
            status_code=400,
            detail="Uploaded file must have a filename.",
        )

    data = bytearray()
    while chunk := await file.read(65536):
        data.extend(chunk)
        if len(data) > MAX_UPLOAD_SIZE_BYTES:
            raise HTTPException(
                status_code=413,
                detail=f"File too large. Maximum size is {MAX_UPLOAD_SIZE_MB}MB.",
            )

    logger.info("📤 Upload received: {} ({} bytes)", filename, len(data))
    return InputFile(name=filename, data=bytes(data))


def _content_disposition(filename: str) -> str:
    """Attachment header that survives non-ASCII file names."""
    fallback = filename.encode("ascii", "replace").decode("ascii").replace('"', "")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


# ---------------------------------------------------------------------------
# Processing
# ---------------------------------------------------------------------------
@router.post("/process")
async def api_process_midi(
    file: UploadFile = File(...),
    velocity_reduction: str = Form(str(DEFAULT_VELOCITY_REDUCTION)),
):
    """
    Upload a MIDI file and download a ZIP with one file per track.

    In each file the named track plays at its original velocity and every
    other track has its note-on velocities reduced by ``velocity_reduction``
    (0-127).  An untouched ``<name>_All.<ext>`` copy is included as well.

    The ordered list of entry names is returned in the ``X-Entry-Names``
    header as a JSON array.
    """
    try:
        amount = validate_amount(velocity_reduction)
    except InvalidAmountError as e:
        raise HTTPException(status_code=400, detail=str(e))

    input_file = await read_upload(file)

    try:
        result = await run_in_threadpool(process_file, input_file, amount)
    except _CLIENT_ERRORS as e:
        logger.warning("⚠️ Rejected {}: {}", input_file.name, e)
        raise HTTPException(status_code=400, detail=str(e))
    except ArchiveError as e:
        logger.error("❌ Archive error for {}: {}", input_file.name, e)
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.exception(f"❌ MIDI processing error: {e}")
        raise HTTPException(
            status_code=500, detail=f"MIDI processing failed: {str(e)}"
        )

    return Response(
        content=result.archive_bytes,
        media_type="application/zip",
        headers={
            "Content-Disposition": _content_disposition(result.download_name),
            "X-Entry-Names": json.dumps(list(result.entry_names)),
            "X-Base-Name": quote(result.base_name),
        },
    )


@router.post("/inspect")
async def api_inspect_midi(file: UploadFile = File(...)):
    """
    Describe an uploaded MIDI file without processing it.

    Returns the tracks with their display names and note counts, plus the
    entry names the archive would contain.
    """
    input_file = await read_upload(file)

    try:
        return await run_in_threadpool(get_midi_summary, input_file)
    except _CLIENT_ERRORS as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"❌ MIDI inspection error: {e}")
        raise HTTPException(
            status_code=500, detail=f"MIDI inspection failed: {str(e)}"
        )
