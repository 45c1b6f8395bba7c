"""
Ledger error taxonomy.

Services raise these; the API layer turns them into a structured
failure body ({"success": false, "error": ...}). All of them are
ValueErrors so callers that only care about "bad request" can
catch the base class.
"""


class LedgerError(ValueError):
    """Base class for every error raised by the ledger services."""

    status_code: int = 400


class ValidationError(LedgerError):
    """Malformed input: negative amounts, bad dates, empty line sets."""

    status_code = 422


class NotFoundError(LedgerError):
    """The requested entity does not exist for this company."""

    status_code = 404


class ConflictError(LedgerError):
    """A uniqueness rule was violated."""

    status_code = 409


class DuplicatePostingError(ConflictError):
    """The source document already has a journal entry."""


class ConfigurationError(LedgerError):
    """No posting rule exists for the requested source type."""


class MappingError(LedgerError):
    """An account code used by a posting rule is missing or inactive."""


class IntegrityError(LedgerError):
    """A journal entry does not balance or a line is malformed."""


class ImmutableEntryError(IntegrityError):
    """Something tried to modify or delete a posted journal record."""


class PersistenceError(LedgerError):
    """The underlying store rejected a write."""

    status_code = 500


def company_not_found(company_id: int) -> str:
    return f"Company {company_id} not found"


def journal_not_found(journal_id: int) -> str:
    return f"Journal {journal_id} not found"


def duplicate_posting(source_type: str, source_id: str) -> str:
    return f"A journal already exists for {source_type} {source_id}"
