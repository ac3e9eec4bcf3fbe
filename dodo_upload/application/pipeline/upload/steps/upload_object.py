from __future__ import annotations

import logging

from dodo_upload.application.pipeline.base import PipelineContext, BaseStep
from dodo_upload.application.pipeline.upload.steps.check_history import is_dedup_hit
from dodo_upload.application.interfaces import IUploader

logger = logging.getLogger(__name__)


class UploadObjectStep(BaseStep):
    name = "upload_object"
    required_keys = ["upload_request", "digest", "history"]

    def __init__(self, uploader: IUploader):
        self.uploader = uploader

    def can_skip(self, context: PipelineContext) -> bool:
        return is_dedup_hit(context)

    async def run(self, context: PipelineContext) -> None:  # type: ignore[override]
        request = context.get("upload_request")
        logger.info("Uploading %s", request.file_path)
        await self.uploader.upload(
            request.file_path,
            context.get("digest"),
            request.extension,
            token=request.token,
            uid=request.uid,
        )
        context.set("uploaded", True)
