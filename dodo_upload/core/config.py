"""
Application configuration using Pydantic Settings
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_settings import BaseSettings

from dodo_upload.core.exceptions import ConfigurationError
from dodo_upload.core.pyd_schemas import KeyPair


# Pre-shared (apikey, hmacKey) pairs accepted by the DoDo API.
DEFAULT_KEY_PAIRS: List[Tuple[str, str]] = [
    ("CK18tnKeKDN", "t8yqYCqv68rKOwgPRUBv4Z2hS4kKajHc0yYzrXLf"),
    ("CGrmRus4Xl4", "BrxswEvSCZK0fTvN5rGyQNqqZAL7vjzZHjDfOXXZ"),
    ("9mEnDRJrkl6", "0ZFDcgZX9iigWbbzmHmqcMFFpZFZcrOu91TsRVCU"),
]


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Remote service endpoints
    api_host: str = "https://apis.imdodo.com"
    files_host: str = "https://files.imdodo.com"
    history_path: str = "/api/oss/file/history"
    upload_sign_path: str = "/api/oss/fetchUploadSign"
    record_path: str = "/api/oss/file/record"

    # Object storage layout
    bucket: str = "oss-dodo-upload"
    storage_prefix: str = "dodo"  # object key prefix: <prefix>/<md5><ext>
    limit_size: int = 100 * 1024 * 1024  # 100MB

    # Client identity sent on every signed call (owned by the remote service)
    client_type: str = "3"
    client_version: str = "0.14.2"
    resource_type: str = "5"

    key_pairs: List[Tuple[str, str]] = DEFAULT_KEY_PAIRS

    # Transport
    request_timeout: int = 300  # 5 minutes
    hash_chunk_size: int = 1024 * 1024

    # Logging Settings
    log_level: str = "INFO"
    log_format: str = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
    log_date_format: str = "%Y-%m-%d %H:%M:%S"
    log_file: Optional[str] = None

    @field_validator("api_host", "files_host")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize hosts so paths can be appended with a single '/'."""
        return v.rstrip("/")

    @field_validator("storage_prefix")
    @classmethod
    def strip_prefix_slashes(cls, v: str) -> str:
        return v.strip("/")

    model_config = {
        "env_prefix": "DODO_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


class ProtocolConfig(BaseModel):
    """Immutable protocol constants handed to every adapter at construction.

    Adapters never read ``Settings`` directly; build one with ``from_settings``.
    """

    model_config = ConfigDict(frozen=True)

    api_host: str
    files_host: str
    history_path: str
    upload_sign_path: str
    record_path: str
    bucket: str
    storage_prefix: str
    limit_size: int
    client_type: str
    client_version: str
    resource_type: str
    key_pairs: Tuple[KeyPair, ...]
    request_timeout: int = 300
    hash_chunk_size: int = 1024 * 1024

    @field_validator("key_pairs")
    @classmethod
    def require_key_pairs(cls, v: Tuple[KeyPair, ...]) -> Tuple[KeyPair, ...]:
        if not v:
            raise ConfigurationError("At least one key pair is required", config_key="key_pairs")
        return v

    @classmethod
    def from_settings(cls, s: "Settings") -> "ProtocolConfig":
        return cls(
            api_host=s.api_host,
            files_host=s.files_host,
            history_path=s.history_path,
            upload_sign_path=s.upload_sign_path,
            record_path=s.record_path,
            bucket=s.bucket,
            storage_prefix=s.storage_prefix,
            limit_size=s.limit_size,
            client_type=s.client_type,
            client_version=s.client_version,
            resource_type=s.resource_type,
            key_pairs=tuple(KeyPair(apikey=k, hmac_key=h) for k, h in s.key_pairs),
            request_timeout=s.request_timeout,
            hash_chunk_size=s.hash_chunk_size,
        )

    # ----- Derived endpoints -----
    @property
    def history_url(self) -> str:
        return f"{self.api_host}{self.history_path}"

    @property
    def upload_sign_url(self) -> str:
        return f"{self.api_host}{self.upload_sign_path}"

    @property
    def record_url(self) -> str:
        return f"{self.api_host}{self.record_path}"

    @property
    def upload_dir(self) -> str:
        """Directory prefix requested in the upload credential ("dodo/")."""
        return f"{self.storage_prefix}/"

    def object_key(self, digest: str, extension: str) -> str:
        return f"{self.storage_prefix}/{digest}{extension}"

    def resource_url(self, digest: str, extension: str) -> str:
        return f"{self.files_host}/{self.object_key(digest, extension)}"


# Global settings instance
settings = Settings()
