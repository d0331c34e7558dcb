"""Exceptions raised by the fraud domain.

Soft outcomes (flag, deny, suspicious links) are returned as results and never
raised. Only failures that leave the caller without a trustworthy answer are
exceptions.
"""


class FraudServiceError(Exception):
    """Base class for fraud domain failures."""


class DataUnavailable(FraudServiceError):
    """The fraud data backend could not be reached or timed out."""


class RuleEvaluationError(FraudServiceError):
    """A rule failed while being evaluated; no partial decision exists."""

    def __init__(self, rule_id: str, cause: BaseException) -> None:
        self.rule_id = rule_id
        self.cause = cause
        super().__init__(f"error evaluating rule {rule_id}: {cause}")


class AuthorityUnavailable(FraudServiceError):
    """The transaction authority failed for a reason other than not-found."""


class TransactionNotFound(FraudServiceError, LookupError):
    """The transaction authority has no record for the reference."""

    def __init__(self, reference: str) -> None:
        self.reference = reference
        super().__init__(f"transaction with reference {reference} not found")
