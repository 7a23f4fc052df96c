"""Error aggregation for a single validation call."""

from typing import Any

from fieldrules.errors import FieldError


class ErrorReport:
    """Field-keyed collection of every error found during one call.

    A report is created fresh for each top-level validation and threaded
    through the walk. It collects messages until finalize() deduplicates
    them; after that it is read-only.

    Example:
        report = ErrorReport()
        report.add(FieldError("email", "mic does not validate as email"))
        report.finalize()
        report.to_dict()  # {"errors": {"email": ["mic does not validate as email"]}}
    """

    ERRORS_KEY = "errors"

    def __init__(self) -> None:
        self._messages: dict[str, list[str]] = {}
        self._errors: list[FieldError] = []
        self._finalized = False

    def add(self, error: FieldError) -> None:
        """Record an error under its (alias-resolved) field name."""
        if self._finalized:
            raise RuntimeError("Cannot add errors to a finalized report")
        self._errors.append(error)
        self._messages.setdefault(error.name, []).append(str(error))

    def extend(self, errors: list[FieldError]) -> None:
        for error in errors:
            self.add(error)

    def finalize(self) -> "ErrorReport":
        """Drop repeated messages per field, keeping first occurrences in order."""
        if not self._finalized:
            for name, messages in self._messages.items():
                self._messages[name] = list(dict.fromkeys(messages))
            self._finalized = True
        return self

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def errors(self) -> list[FieldError]:
        """Every FieldError added, in the order they were found."""
        return list(self._errors)

    @property
    def messages(self) -> dict[str, list[str]]:
        return {name: list(messages) for name, messages in self._messages.items()}

    def for_field(self, name: str) -> list[str]:
        return list(self._messages.get(name, []))

    def __bool__(self) -> bool:
        return bool(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def to_dict(self) -> dict[str, Any]:
        return {self.ERRORS_KEY: self.messages}
