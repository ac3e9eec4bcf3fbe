from __future__ import annotations

import logging

from dodo_upload.application.pipeline.base import PipelineContext, BaseStep
from dodo_upload.application.interfaces import IHistoryChecker

logger = logging.getLogger(__name__)


class CheckHistoryStep(BaseStep):
    """Dedup lookup. On a hit the existing URL becomes the run's result.

    Input:  upload_request, digest
    Output: history, resource_url (only on a hit)
    """

    name = "check_history"
    required_keys = ["upload_request", "digest"]

    def __init__(self, history_checker: IHistoryChecker):
        self.history_checker = history_checker

    async def run(self, context: PipelineContext) -> None:  # type: ignore[override]
        request = context.get("upload_request")
        history = await self.history_checker.check_history(
            context.get("digest"), request.token, request.uid
        )
        context.set("history", history)
        if history.has_record:
            context.set("resource_url", history.resource_url)
            logger.info("Dedup hit for %s: %s", request.filename, history.resource_url)


def is_dedup_hit(context: PipelineContext) -> bool:
    history = context.get("history")
    return bool(history is not None and history.has_record)
