from __future__ import annotations
from typing import Any, Mapping, Optional, Protocol, Sequence, Tuple


class IHttpClient(Protocol):
    """Minimal HTTP transport used by the DoDo adapters.

    Implementations raise ``NetworkError`` on transport or HTTP-status failure.
    """

    async def post_form(
        self,
        url: str,
        fields: Sequence[Tuple[str, str]],
        *,
        headers: Optional[Mapping[str, str]] = None,
        parse_json: bool = True,
    ) -> Any:
        """POST an ordered x-www-form-urlencoded body.

        Returns the decoded JSON body, or None when ``parse_json`` is False.
        """
        ...

    async def post_multipart(
        self,
        url: str,
        fields: Sequence[Tuple[str, str]],
        *,
        file_field: str,
        file_path: str,
        filename: str,
    ) -> None:
        """POST a multipart form whose last part streams ``file_path``."""
        ...
