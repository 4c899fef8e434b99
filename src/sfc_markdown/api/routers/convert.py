from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from ...config import AppConfig
from ...core import ConversionError, ConversionService
from ...errors import SourceDirectoryError
from ..dependencies import get_config, get_service

router = APIRouter(tags=["conversion"])


@router.post("/convert", summary="Convert a single component file")
async def convert_component(
    file: UploadFile = File(...),
    service: ConversionService = Depends(get_service),
    config: AppConfig = Depends(get_config),
) -> dict[str, str | list[str]]:
    content = await file.read()
    _enforce_size_limit(content, config)
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=400, detail="EXTRACTION_FAILED") from exc
    filename = file.filename or "upload.vue"
    try:
        converted = await run_in_threadpool(service.convert_text, text, filename)
    except ConversionError as exc:
        raise HTTPException(status_code=400, detail=exc.code) from exc
    return {
        "title": converted.document.title,
        "markdown": converted.text,
        "warnings": converted.warnings,
    }


@router.post("/batch", summary="Convert the configured file list")
async def batch_convert(
    service: ConversionService = Depends(get_service),
) -> dict[str, object]:
    try:
        batch_result = await run_in_threadpool(service.batch_convert)
    except SourceDirectoryError as exc:
        raise HTTPException(status_code=404, detail=exc.code) from exc
    results = [
        {
            "source": item.source_name,
            "status": item.status,
            "output_path": str(item.output_path) if item.output_path else None,
            "warnings": item.warnings,
            "error_code": item.error_code,
        }
        for item in batch_result.results
    ]
    summary = batch_result.summary
    return {
        "run_id": batch_result.run_id,
        "results": results,
        "summary": {
            "total": summary.total,
            "successes": summary.successes,
            "failures": summary.failures,
            "warnings": summary.warnings,
        },
    }


def _enforce_size_limit(payload: bytes, config: AppConfig) -> None:
    max_bytes = config.runtime.max_file_size_mb * 1024 * 1024
    if len(payload) > max_bytes:
        raise HTTPException(status_code=413, detail="SIZE_LIMIT")


__all__ = [
    "router",
]
