from .http_client import IHttpClient
from .fingerprinter import IFingerprinter
from .key_selector import IKeySelector
from .utils import IClock
from .history_checker import IHistoryChecker
from .uploader import IUploader
from .recorder import IRecorder
from .upload_adapters import IUploadPipelineAdapters

__all__ = [
    "IHttpClient",
    "IFingerprinter",
    "IKeySelector",
    "IClock",
    "IHistoryChecker",
    "IUploader",
    "IRecorder",
    "IUploadPipelineAdapters",
]
