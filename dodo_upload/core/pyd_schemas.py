from __future__ import annotations

import os
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, constr, model_validator


class KeyPair(BaseModel):
    """Pre-shared signing credential: public ``apikey`` plus HMAC secret."""

    model_config = ConfigDict(frozen=True)

    apikey: constr(min_length=1)
    hmac_key: constr(min_length=1)


class UploadRequest(BaseModel):
    """Immutable input to one upload run."""

    model_config = ConfigDict(frozen=True)

    file_path: str
    token: str
    uid: str

    @property
    def filename(self) -> str:
        return os.path.basename(self.file_path)

    @property
    def extension(self) -> str:
        """Suffix including the dot, e.g. ".png"; empty when there is none."""
        return os.path.splitext(self.file_path)[1]


class HistoryResult(BaseModel):
    """Payload of the history endpoint (``data`` member)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    has_record: bool = Field(alias="hasRecord")
    resource_url: Optional[str] = Field(default=None, alias="resourceUrl")

    @model_validator(mode="after")
    def _url_required_on_hit(self) -> "HistoryResult":
        if self.has_record and not self.resource_url:
            raise ValueError("hasRecord is true but resourceUrl is missing")
        return self


class UploadCredential(BaseModel):
    """Short-lived direct-upload descriptor issued by the upload-sign endpoint.

    Fields are forwarded verbatim to the storage host in the order the server
    sent them. Unknown extras returned by the server are kept.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    access_key_id: str = Field(alias="OSSAccessKeyId")
    policy: str
    signature: str
    dir: str
    host: str
    expire: int

    _wire_order: List[str] = PrivateAttr(default_factory=list)

    @model_validator(mode="wrap")
    @classmethod
    def _remember_wire_order(cls, data: Any, handler):
        model = handler(data)
        if isinstance(data, dict):
            fields = cls.model_fields
            model._wire_order = [
                (fields[k].alias or k) if k in fields else k for k in data
            ]
        return model

    def form_fields(self) -> List[Tuple[str, str]]:
        """All credential fields as (wire name, string value), in server order.

        Fields set by their Python name count under their wire alias.
        """
        dumped = self.model_dump(by_alias=True)
        names = [n for n in self._wire_order if n in dumped]
        names += [n for n in dumped if n not in names]
        return [(name, _stringify(dumped[name])) for name in names]


class UploadResult(BaseModel):
    url: str
    filename: str


def _stringify(value: Any) -> str:
    # the storage host expects lowercase true/false
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
