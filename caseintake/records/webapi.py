"""OData Web API implementation of RecordService.

Issues single-record GET requests of the form

    {base_url}/api/data/{version}/{entity_set}({id})?$select=a,b

and maps HTTP failures onto the RecordFetchError hierarchy.
"""

from collections.abc import Sequence
from typing import Any

import httpx

from caseintake.config.models.records import RecordServiceConfig
from caseintake.exceptions import (
    RecordAccessDeniedError,
    RecordFetchError,
    RecordNotFoundError,
    TransientFetchError,
)
from caseintake.form.models import normalize_record_id
from caseintake.observability.logging import get_logger
from caseintake.records.service import RecordService

logger = get_logger(__name__)

TRANSIENT_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


class WebApiRecordService(RecordService):
    """Async record service backed by an OData Web API.

    Attributes:
        base_url: Root URL of the Web API host
    """

    def __init__(
        self,
        config: RecordServiceConfig,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the service.

        Args:
            config: Record service configuration
            client: Preconfigured HTTP client (e.g. with a custom transport)
        """
        self._config = config
        self.base_url = config.base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=config.timeout_seconds,
        )

    async def __aenter__(self) -> "WebApiRecordService":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "OData-MaxVersion": "4.0",
            "OData-Version": "4.0",
        }
        if self._config.access_token is not None:
            headers["Authorization"] = f"Bearer {self._config.access_token.get_secret_value()}"
        return headers

    def _path(self, record_type: str, record_id: str) -> str:
        entity_set = self._config.entity_sets.get(record_type, f"{record_type}s")
        return f"/api/data/{self._config.api_version}/{entity_set}({record_id})"

    async def fetch(
        self,
        record_type: str,
        record_id: str,
        fields: Sequence[str],
    ) -> dict[str, Any]:
        record_id = normalize_record_id(record_id)
        try:
            response = await self._client.get(
                self._path(record_type, record_id),
                headers=self._headers(),
                params={"$select": ",".join(fields)},
            )
        except httpx.HTTPError as e:
            logger.warning(
                "record_fetch_transport_error",
                record_type=record_type,
                record_id=record_id,
                error=str(e),
            )
            raise TransientFetchError(
                f"Request for {record_type} {record_id} failed: {e}",
                record_type=record_type,
                record_id=record_id,
            ) from e

        if response.status_code >= 400:
            raise self._error_for(response, record_type, record_id)

        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            logger.warning(
                "record_fetch_bad_body",
                record_type=record_type,
                record_id=record_id,
                status_code=response.status_code,
            )
            raise TransientFetchError(
                f"Response for {record_type} {record_id} is not a record",
                record_type=record_type,
                record_id=record_id,
            )
        return {field: data.get(field) for field in fields}

    def _error_for(
        self,
        response: httpx.Response,
        record_type: str,
        record_id: str,
    ) -> RecordFetchError:
        message = _error_message(response)

        status = response.status_code
        logger.warning(
            "record_fetch_failed",
            record_type=record_type,
            record_id=record_id,
            status_code=status,
        )

        error_cls: type[RecordFetchError]
        if status == 404:
            error_cls = RecordNotFoundError
        elif status in (401, 403):
            error_cls = RecordAccessDeniedError
        elif status in TRANSIENT_STATUS_CODES or status >= 500:
            error_cls = TransientFetchError
        else:
            error_cls = RecordFetchError
        return error_cls(message or f"HTTP {status}", record_type=record_type, record_id=record_id)


def _error_message(response: httpx.Response) -> str:
    """Pull error.message out of an OData error body, else the raw text."""
    try:
        body = response.json()
    except ValueError:
        return response.text

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    if isinstance(error, str):
        return error
    return response.text
