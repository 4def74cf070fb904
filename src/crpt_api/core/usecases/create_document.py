from __future__ import annotations

import logging

import httpx

from ..errors import CrptApiError
from ...infra.http_client import HttpClient
from ...infra.schemas import Document

logger = logging.getLogger(__name__)


class CreateDocumentUseCase:
    def __init__(self, http_client: HttpClient, api_url: str) -> None:
        self._http = http_client
        self._api_url = api_url

    def execute(self, document: Document, signature: str) -> dict:
        """Submit ``document`` signed with ``signature`` and return the decoded response.

        Blocks while the client's rate limit is exhausted. The permit is spent even
        when the request fails.

        Raises:
            ValueError: If the signature is empty (no permit is consumed).
            CancellationError: If the wait for a permit was abandoned.
            CrptApiError: On a non-2xx response or a transport failure.
        """
        if not signature:
            raise ValueError("signature must not be empty")

        payload = document.to_payload()
        logger.info("Submitting document %s (%s)", document.doc_id or "-", document.doc_type)
        try:
            data = self._http.post_json(self._api_url, payload, headers={"Signature": signature})
        except httpx.HTTPStatusError as e:
            resp = e.response
            raise CrptApiError(
                f"Unexpected response code: {resp.status_code}",
                status_code=resp.status_code,
                response_text=resp.text,
            ) from e
        except (httpx.HTTPError, RuntimeError, TypeError, ValueError) as e:
            # RuntimeError: the HTTP client was closed under an in-flight request
            raise CrptApiError(f"IO error during API call: {e}") from e

        logger.info("Document %s accepted: %s", document.doc_id or "-", data)
        return data
