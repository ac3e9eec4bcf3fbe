from __future__ import annotations

import logging

from dodo_upload.application.pipeline.base import PipelineContext, BaseStep
from dodo_upload.application.pipeline.upload.steps.check_history import is_dedup_hit
from dodo_upload.application.interfaces import IRecorder

logger = logging.getLogger(__name__)


class RecordUploadStep(BaseStep):
    """Commit the uploaded object; its return value is the final URL.

    Input:  upload_request, digest, uploaded
    Output: resource_url
    """

    name = "record_upload"
    required_keys = ["upload_request", "digest", "history"]

    def __init__(self, recorder: IRecorder):
        self.recorder = recorder

    def can_skip(self, context: PipelineContext) -> bool:
        return is_dedup_hit(context)

    async def run(self, context: PipelineContext) -> None:  # type: ignore[override]
        context.require(["uploaded"])
        request = context.get("upload_request")
        url = await self.recorder.record(
            context.get("digest"),
            request.extension,
            request.file_path,
            request.token,
            request.uid,
        )
        context.set("resource_url", url)
        logger.info("Recorded %s: %s", request.filename, url)
