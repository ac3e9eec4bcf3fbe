from .http_client_aiohttp import AiohttpHttpClient
from .fingerprinter_md5 import Md5Fingerprinter
from .key_selector_random import RandomKeySelector
from .clock import SystemClock
from .history_checker_dodo import DodoHistoryChecker
from .uploader_oss import OssUploader
from .recorder_dodo import DodoRecorder

__all__ = [
    "AiohttpHttpClient",
    "Md5Fingerprinter",
    "RandomKeySelector",
    "SystemClock",
    "DodoHistoryChecker",
    "OssUploader",
    "DodoRecorder",
]
