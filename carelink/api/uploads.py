"""
Name: Multipart Upload Reader

Responsibilities:
  - Read declared multipart file parts into IncomingFile values
  - Run the ingestion checks before any use case sees the files

Constraints:
  - Each part is read at most max_upload_bytes + 1 bytes
  - Parts with an empty filename (no file chosen) are ignored
"""

import os
from typing import Dict, List, Mapping, Optional, Sequence

from fastapi import UploadFile

from ..application.uploads import (
    IncomingFile,
    UploadField,
    UploadLimits,
    validate_uploads,
)
from ..config import get_settings


async def read_incoming(
    field: UploadField, upload: UploadFile, max_bytes: int
) -> IncomingFile:
    try:
        content = await upload.read(max_bytes + 1)
    finally:
        await upload.close()
    return IncomingFile(
        field=field,
        filename=os.path.basename(upload.filename or ""),
        content_type=(upload.content_type or "").lower(),
        content=content,
    )


async def ingest_uploads(
    parts: Mapping[UploadField, Optional[Sequence[UploadFile]]],
) -> Dict[UploadField, List[IncomingFile]]:
    """
    R: Read and validate every declared file field.

    Raises:
        UploadRejectedError: when a count, size or type rule is violated
    """
    settings = get_settings()
    limits = UploadLimits(
        max_file_bytes=settings.max_upload_bytes,
        max_home_photos=settings.max_home_photos,
    )

    incoming: Dict[UploadField, List[IncomingFile]] = {}
    for field, uploads in parts.items():
        incoming[field] = [
            await read_incoming(field, upload, limits.max_file_bytes)
            for upload in uploads or []
            if upload is not None and upload.filename
        ]

    validate_uploads([f for files in incoming.values() for f in files], limits)
    return incoming


def single(
    files: Dict[UploadField, List[IncomingFile]], field: UploadField
) -> Optional[IncomingFile]:
    matches = files.get(field) or []
    return matches[0] if matches else None
