from __future__ import annotations

import logging

from dodo_upload.application.pipeline.base import PipelineContext, BaseStep
from dodo_upload.application.interfaces import IFingerprinter

logger = logging.getLogger(__name__)


class FingerprintStep(BaseStep):
    name = "fingerprint"
    required_keys = ["upload_request"]

    def __init__(self, fingerprinter: IFingerprinter):
        self.fingerprinter = fingerprinter

    async def run(self, context: PipelineContext) -> None:  # type: ignore[override]
        request = context.get("upload_request")
        digest = await self.fingerprinter.digest(request.file_path)
        context.set("digest", digest)
        logger.info("Fingerprint %s -> %s", request.filename, digest)
