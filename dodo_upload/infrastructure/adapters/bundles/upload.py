from __future__ import annotations

from types import SimpleNamespace
from typing import Optional

from dodo_upload.application.interfaces import IHttpClient
from dodo_upload.application.interfaces.upload_adapters import IUploadPipelineAdapters
from dodo_upload.infrastructure.adapters import (
    AiohttpHttpClient,
    Md5Fingerprinter,
    DodoHistoryChecker,
    OssUploader,
    DodoRecorder,
)
from dodo_upload.core.config import ProtocolConfig, settings


def get_upload_adapter_bundle(
    *,
    config: Optional[ProtocolConfig] = None,
    http: Optional[IHttpClient] = None,
) -> IUploadPipelineAdapters:
    """Provide the adapters container for the upload pipeline.

    ``http`` lets callers swap the transport (tests pass a mock); the
    protocol constants default to the environment-driven settings.
    """
    cfg = config or ProtocolConfig.from_settings(settings)
    transport = http or AiohttpHttpClient(timeout=cfg.request_timeout)

    return SimpleNamespace(
        fingerprinter=Md5Fingerprinter(chunk_size=cfg.hash_chunk_size),
        history_checker=DodoHistoryChecker(cfg, transport),
        uploader=OssUploader(cfg, transport),
        recorder=DodoRecorder(cfg, transport),
    )
