"""HTTP client for the transaction authority.

The authority owns the ground-truth transaction records that payment links
reference. A 404 is reported as ``TransactionNotFound``; every other failure
(non-2xx status, undecodable body, transport error) as
``AuthorityUnavailable``. Retries are left to the transport.
"""

from urllib.parse import quote

import httpx
import structlog
from pydantic import ValidationError

from fraud_service.domains.fraud.authority import TransactionAuthority
from fraud_service.domains.fraud.errors import AuthorityUnavailable, TransactionNotFound
from fraud_service.domains.fraud.models import AuthoritativeTransaction

logger = structlog.get_logger()


class HTTPTransactionAuthority(TransactionAuthority):
    """Fetches ``GET {base_url}/transactions/{reference}``."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("transaction service URL not configured")
        self._base_url = base_url.rstrip("/")
        self._timeout = httpx.Timeout(timeout_seconds)
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def get_transaction(self, reference: str) -> AuthoritativeTransaction:
        url = f"{self._base_url}/transactions/{quote(reference, safe='')}"
        try:
            response = await self._get_client().get(url)
        except httpx.HTTPError as exc:
            logger.warning("authority_request_failed", reference=reference, error=str(exc))
            raise AuthorityUnavailable(
                f"failed to get transaction from transaction service: {exc}"
            ) from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            raise TransactionNotFound(reference)

        if not response.is_success:
            logger.warning(
                "authority_bad_status",
                reference=reference,
                status_code=response.status_code,
            )
            raise AuthorityUnavailable(
                f"transaction service returned status {response.status_code}: {response.text}"
            )

        try:
            return AuthoritativeTransaction.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.warning("authority_decode_failed", reference=reference)
            raise AuthorityUnavailable(
                f"failed to decode transaction response from transaction service: {exc}"
            ) from exc

    async def ping(self) -> bool:
        """Return True if the authority answers at all."""
        try:
            await self._get_client().get(f"{self._base_url}/health")
        except httpx.HTTPError:
            return False
        return True

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
