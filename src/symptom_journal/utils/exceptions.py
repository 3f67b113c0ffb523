"""Custom exceptions for the symptom journal."""


class SymptomJournalError(Exception):
    """Base exception for all symptom journal errors."""

    pass


class ConfigurationError(SymptomJournalError):
    """Raised when there is a configuration error."""

    pass


class StorageError(SymptomJournalError):
    """Raised when reading or writing a journal file fails."""

    pass


class ReportError(SymptomJournalError):
    """Raised when a report document cannot be rendered."""

    pass


class ValidationError(SymptomJournalError):
    """Raised when user-supplied entry data is invalid."""

    pass
