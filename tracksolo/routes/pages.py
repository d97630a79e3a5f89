"""
Track Solo - Page Routes

Serves the single browser-facing page: a velocity reduction input, a file
picker, and after a submission the list of created files and a download link
for the archive.

The form posts back to ``/`` and the archive is embedded in the response as a
base64 data URL, so the browser can download it without a second request.
"""

import base64

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse
from loguru import logger

from tracksolo.config import APP_VERSION, DEFAULT_VELOCITY_REDUCTION, MAX_VELOCITY
from tracksolo.errors import InvalidAmountError, TrackSoloError
from tracksolo.routes.api import read_upload
from tracksolo.services.processor import process_file
from tracksolo.services.velocity import validate_amount

router = APIRouter(tags=["Pages"])


def _render(request: Request, status_code: int = 200, **extra) -> HTMLResponse:
    context = {
        "page_title": "Track Solo",
        "app_version": APP_VERSION,
        "max_velocity": MAX_VELOCITY,
        "velocity_reduction": DEFAULT_VELOCITY_REDUCTION,
        "error": None,
        "number_error": None,
        "file_names": [],
        "download_url": None,
        "zip_name": None,
    }
    context.update(extra)
    return request.app.state.templates.TemplateResponse(
        request, "index.html", context, status_code=status_code
    )


@router.get("/", response_class=HTMLResponse)
async def index_page(request: Request):
    """Show the upload form."""
    return _render(request)


@router.post("/", response_class=HTMLResponse)
async def index_submit(
    request: Request,
    file: UploadFile = File(...),
    velocity_reduction: str = Form(str(DEFAULT_VELOCITY_REDUCTION)),
):
    """Process the submitted file and show the result on the same page."""
    try:
        amount = validate_amount(velocity_reduction)
    except InvalidAmountError as e:
        return _render(
            request,
            status_code=400,
            velocity_reduction=velocity_reduction,
            number_error=str(e),
            error="Cannot process file until a valid number is entered",
        )

    try:
        input_file = await read_upload(file)
    except HTTPException as e:
        logger.warning("⚠️ Upload rejected: {}", e.detail)
        return _render(
            request,
            status_code=e.status_code,
            velocity_reduction=amount,
            error=e.detail,
        )

    try:
        result = await run_in_threadpool(process_file, input_file, amount)
    except TrackSoloError as e:
        logger.warning("⚠️ Could not process {}: {}", input_file.name, e)
        return _render(
            request,
            status_code=400,
            velocity_reduction=amount,
            error=str(e),
        )

    encoded = base64.b64encode(result.archive_bytes).decode("ascii")
    return _render(
        request,
        velocity_reduction=amount,
        file_names=list(result.entry_names),
        download_url=f"data:application/zip;base64,{encoded}",
        zip_name=result.download_name,
    )
