from dodo_upload.application.interfaces import IUploadPipelineAdapters
from dodo_upload.application.pipeline.base import PipelineContext
from dodo_upload.application.pipeline.upload.builder import build_upload_pipeline_via_container
from dodo_upload.core.pyd_schemas import UploadResult


class UploadFileUseCase:
    """Upload one file and return its public URL, skipping known content.

    Each call builds its own context and pipeline, so concurrent runs share
    nothing but the (stateless) adapters.
    """

    def __init__(self, adapters: IUploadPipelineAdapters) -> None:
        self._adapters = adapters

    async def run(self, file_path: str, token: str, uid: str) -> UploadResult:
        ctx = PipelineContext(
            input={"file_path": file_path, "token": token, "uid": uid}
        )

        pipeline = build_upload_pipeline_via_container(self._adapters)
        report = await pipeline.execute(ctx)
        ctx = report.context

        return UploadResult(
            url=ctx.get("resource_url"),
            filename=ctx.get("upload_request").filename,
        )
