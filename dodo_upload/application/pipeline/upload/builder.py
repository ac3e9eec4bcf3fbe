from __future__ import annotations

from dodo_upload.application.pipeline.base import Pipeline, make_logging_middleware
from dodo_upload.application.pipeline.factory import PipelineFactory
from dodo_upload.application.pipeline.upload.steps.validate_input import ValidateInputStep
from dodo_upload.application.pipeline.upload.steps.fingerprint import FingerprintStep
from dodo_upload.application.pipeline.upload.steps.check_history import CheckHistoryStep
from dodo_upload.application.pipeline.upload.steps.upload_object import UploadObjectStep
from dodo_upload.application.pipeline.upload.steps.record_upload import RecordUploadStep
from dodo_upload.application.interfaces import IUploadPipelineAdapters


def build_upload_pipeline_via_container(
    adapters: IUploadPipelineAdapters,
    *,
    enable_logging_middleware: bool = True,
) -> Pipeline:
    """validate -> fingerprint -> check history -> (skip | upload -> record).

    The first error aborts the run.
    """
    middlewares = [make_logging_middleware()] if enable_logging_middleware else []
    factory = PipelineFactory(middlewares=middlewares)
    factory.add(ValidateInputStep())
    factory.add(FingerprintStep(adapters.fingerprinter))
    factory.add(CheckHistoryStep(adapters.history_checker))
    factory.add(UploadObjectStep(adapters.uploader))
    factory.add(RecordUploadStep(adapters.recorder))

    return factory.build()
