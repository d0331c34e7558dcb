"""Payment-link consistency checks against the transaction authority.

A payment link carries its transaction terms in the query string, where they
can be edited client-side. The authority's record is treated as ground truth
and any divergence makes the link suspicious. Malformed links are themselves
a suspicious signal, so ``validate_link`` never raises for caller input.
"""

import asyncio
import re
from urllib.parse import parse_qs, urlsplit

import structlog

from .authority import TransactionAuthority
from .errors import AuthorityUnavailable, TransactionNotFound
from .models import LinkParameters, LinkValidationResult

logger = structlog.get_logger()

REQUIRED_PARAMS = ("ref", "merchant_id", "amount", "currency")

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


class LinkParseError(ValueError):
    """Raised by ``parse_link`` with the reason to report."""


def _query_value(query: dict[str, list[str]], name: str) -> str:
    values = query.get(name)
    return values[0] if values else ""


def _parse_int(raw: str) -> int | None:
    if not _INTEGER_RE.fullmatch(raw):
        return None
    return int(raw)


def parse_link(link_url: str) -> LinkParameters:
    """Extract link parameters, raising LinkParseError on malformed input."""
    try:
        parts = urlsplit(link_url)
        query = parse_qs(parts.query, keep_blank_values=True)
    except ValueError as exc:
        raise LinkParseError("Invalid payment link URL format") from exc

    values = {name: _query_value(query, name) for name in REQUIRED_PARAMS}
    if not all(values.values()):
        raise LinkParseError(
            "Missing required parameters in payment link (ref, merchant_id, amount, currency)"
        )

    merchant_id = _parse_int(values["merchant_id"])
    if merchant_id is None:
        raise LinkParseError("Invalid merchant_id format in payment link")

    amount = _parse_int(values["amount"])
    if amount is None:
        raise LinkParseError("Invalid amount format in payment link")

    return LinkParameters(
        reference=values["ref"],
        merchant_id=merchant_id,
        amount=amount,
        currency=values["currency"],
        mode=_query_value(query, "mode") or None,
    )


class PaymentLinkValidator:
    def __init__(self, authority: TransactionAuthority) -> None:
        self._authority = authority

    async def validate_link(
        self, link_url: str, timeout: float | None = None
    ) -> LinkValidationResult:
        try:
            params = parse_link(link_url)
        except LinkParseError as exc:
            return self._suspicious(str(exc), link_url=link_url)

        try:
            async with asyncio.timeout(timeout):
                original = await self._authority.get_transaction(params.reference)
        except TransactionNotFound:
            return self._suspicious(
                f"Transaction reference {params.reference} not found for payment link",
                reference=params.reference,
            )
        except AuthorityUnavailable as exc:
            return self._suspicious(
                f"Error fetching original transaction details: {exc}",
                reference=params.reference,
            )
        except TimeoutError:
            return self._suspicious(
                "Error fetching original transaction details: "
                f"request exceeded deadline of {timeout}s",
                reference=params.reference,
            )

        # Mode is carried for forward compatibility; all links use the same checks.
        if original.merchant_id != params.merchant_id:
            return self._suspicious(
                f"Merchant ID mismatch: link has {params.merchant_id}, "
                f"original has {original.merchant_id}",
                reference=params.reference,
            )
        if original.amount != params.amount:
            return self._suspicious(
                f"Amount mismatch: link has {params.amount}, original has {original.amount}",
                reference=params.reference,
            )
        if original.currency != params.currency:
            return self._suspicious(
                f"Currency mismatch: link has {params.currency}, "
                f"original has {original.currency}",
                reference=params.reference,
            )

        logger.info("payment_link_validated", reference=params.reference)
        return LinkValidationResult(is_suspicious=False, reason="Payment link is legitimate")

    @staticmethod
    def _suspicious(reason: str, **context) -> LinkValidationResult:
        logger.info("payment_link_suspicious", reason=reason, **context)
        return LinkValidationResult(is_suspicious=True, reason=reason)
