"""Error taxonomy shared by the posting, reversal and domain services.

Services raise these; the API layer in ``cafebooks.main`` maps them to HTTP
status codes. Validation and configuration problems are raised before the
batch commits and roll it back, so only ``StoreError`` can surface from a commit.
"""


class LedgerError(Exception):
    pass


class ValidationError(LedgerError, ValueError):
    """Caller-supplied data violates a precondition."""


class UnbalancedEntryError(ValidationError):
    pass


class ConfigurationError(LedgerError):
    """A required well-known account is missing from the chart of accounts."""


class NotFoundError(LedgerError, LookupError):
    pass


class StoreError(LedgerError):
    """The atomic commit failed; nothing was applied and the call is safe to retry."""
