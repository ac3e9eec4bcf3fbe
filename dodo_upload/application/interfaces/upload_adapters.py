from __future__ import annotations

from typing import Protocol, runtime_checkable

from .fingerprinter import IFingerprinter
from .history_checker import IHistoryChecker
from .uploader import IUploader
from .recorder import IRecorder


@runtime_checkable
class IUploadPipelineAdapters(Protocol):
    fingerprinter: IFingerprinter
    history_checker: IHistoryChecker
    uploader: IUploader
    recorder: IRecorder
