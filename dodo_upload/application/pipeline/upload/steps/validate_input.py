from __future__ import annotations

from dodo_upload.application.pipeline.base import PipelineContext, BaseStep
from dodo_upload.core.exceptions import InvalidInputError
from dodo_upload.core.pyd_schemas import UploadRequest
from dodo_upload.utils.path_utils import has_extension


class ValidateInputStep(BaseStep):
    """Rejects bad caller input before any network activity.

    Input:  file_path, token, uid
    Output: upload_request
    """

    name = "validate_input"

    async def run(self, context: PipelineContext) -> None:  # type: ignore[override]
        data = context.input or {}
        values = {}
        for field in ("file_path", "token", "uid"):
            value = data.get(field)
            if not isinstance(value, str) or not value.strip():
                raise InvalidInputError(f"{field} must not be empty", field=field)
            values[field] = value

        if not has_extension(values["file_path"]):
            raise InvalidInputError(
                f"File extension must not be empty: {values['file_path']}",
                field="file_path",
            )

        context.set("upload_request", UploadRequest(**values))
