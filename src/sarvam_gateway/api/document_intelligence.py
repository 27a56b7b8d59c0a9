"""
Document Intelligence Routes.

Endpoints:
    POST /api/document-intelligence/process  - Upload a PDF/ZIP and run a job
    GET  /api/document-intelligence/health   - Route health

Request (multipart/form-data):
    file:          the document (.pdf or .zip)
    language:      document language (default "en-IN")
    output_format: provider output format (default "html")

Example:
    curl -F "file=@report.pdf" -F "language=hi-IN" \\
        http://localhost:3000/api/document-intelligence/process
"""
from __future__ import annotations

import os
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.encoders import jsonable_encoder

from sarvam_gateway.api.dependencies import get_document_service
from sarvam_gateway.services.document_service import DocumentService, DocumentUpload

router = APIRouter(prefix="/api/document-intelligence", tags=["document-intelligence"])


def _upload_size(file: UploadFile) -> int:
    stream = file.file
    pos = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(pos)
    return size


@router.post("/process")
def process_document(
    file: Optional[UploadFile] = File(default=None),
    language: Optional[str] = Form(default=None),
    output_format: Optional[str] = Form(default=None),
    service: DocumentService = Depends(get_document_service),
):
    """
    Run the full document job sequence for one upload.

    Blocks until the provider job reaches a terminal state, so the
    handler runs on the worker thread pool.
    """
    if file is None:
        upload = DocumentUpload(filename=None, stream=None)
    else:
        upload = DocumentUpload(filename=file.filename, stream=file.file, size_bytes=_upload_size(file))

    result = service.process(upload, language=language, output_format=output_format)

    return {
        "success": True,
        "message": "Document processed successfully",
        "data": jsonable_encoder(result.to_dict()),
    }


@router.get("/health")
def health():
    return {"success": True, "message": "Document Intelligence route is healthy"}
