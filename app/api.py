"""
API Module
==========

FastAPI backend: ``/merge`` uploads and merges workbooks, ``/download``
serves produced files, ``/preview/{job_id}`` publishes a viewable copy of a
finished merge.
"""

import shutil
import tempfile
from pathlib import Path
from typing import Dict, List, Optional
from uuid import uuid4

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.responses import FileResponse, JSONResponse

from app.backend.process import (
    build_readable_output,
    is_accepted_file,
    merge_files,
    publish_preview,
    write_json_output,
)
from core.config import get_settings
from core.ir import MergeResult
from core.logger import get_logger
from core.roster.errors import PreviewPublishError

logger = get_logger(__name__)

app = FastAPI(title="Student Counsellor Roster Merge")

OUTPUT_ROOT = Path.cwd() / get_settings().OUTPUT_DIR
FILE_REGISTRY: Dict[str, str] = {}
JOB_RESULTS: Dict[str, MergeResult] = {}
# oldest finished merges are forgotten past this many
MAX_JOB_RESULTS = 100


def _register_file(path: str) -> str:
    """Register *path* for download and return its file_id."""
    file_id = uuid4().hex
    FILE_REGISTRY[file_id] = path
    return file_id


def _remember_job(job_id: str, merge_result: MergeResult) -> None:
    JOB_RESULTS[job_id] = merge_result
    while len(JOB_RESULTS) > MAX_JOB_RESULTS:
        evicted = next(iter(JOB_RESULTS))
        del JOB_RESULTS[evicted]
        logger.debug("Evicted job %s from preview cache", evicted)


def _download_entry(path: str) -> Dict[str, str]:
    file_id = _register_file(path)
    return {"file_id": file_id, "download_url": f"/download/{file_id}", "path": path}


@app.get("/download/{file_id}")
def download_file(file_id: str):
    path = FILE_REGISTRY.get(file_id)
    if not path or not Path(path).exists():
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(path, filename=Path(path).name)


@app.post("/merge")
async def merge_endpoint(files: Optional[List[UploadFile]] = File(default=None)):
    """
    Merge uploaded ``.xlsx`` workbooks (any order; cohort order is fixed).
    Returns job_id, the readable result and download links.
    """
    if not files:
        raise HTTPException(status_code=400, detail="No input files provided")
    rejected = [f.filename for f in files if not is_accepted_file(f.filename)]
    if rejected:
        raise HTTPException(status_code=400, detail=f"Only .xlsx files are accepted: {rejected}")

    upload_dir = Path(tempfile.mkdtemp(prefix="uploads_"))
    try:
        input_paths: List[str] = []
        for f in files:
            # Filenames carry the cohort years, keep them.
            dest = upload_dir / Path(f.filename).name
            dest.write_bytes(await f.read())
            input_paths.append(str(dest))

        job_id = uuid4().hex
        output_dir = OUTPUT_ROOT / job_id
        output_dir.mkdir(parents=True, exist_ok=True)

        merge_result, export_path = merge_files(input_paths, str(output_dir))
        result = build_readable_output(
            merge_result,
            input_files=[Path(p).name for p in input_paths],
            output_dir=str(output_dir),
            export_path=export_path,
        )
        json_path = write_json_output(result, str(output_dir))
    finally:
        shutil.rmtree(upload_dir, ignore_errors=True)

    _remember_job(job_id, merge_result)
    logger.info("Job %s merged %d record(s)", job_id, merge_result.statistics.total_records)

    return JSONResponse(
        {
            "job_id": job_id,
            "result": result,
            "downloads": {
                "export": _download_entry(export_path),
                "json": _download_entry(json_path),
            },
        }
    )


@app.post("/preview/{job_id}")
def preview_endpoint(job_id: str):
    """Publish a viewable copy of a finished merge and return its URL."""
    merge_result = JOB_RESULTS.get(job_id)
    if merge_result is None:
        raise HTTPException(status_code=404, detail="Job not found")
    settings = get_settings()
    if not settings.PREVIEW_ENDPOINT_URL.strip():
        raise HTTPException(status_code=503, detail="Preview endpoint is not configured")
    try:
        url = publish_preview(merge_result, settings=settings)
    except PreviewPublishError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    return JSONResponse({"job_id": job_id, "url": url})
