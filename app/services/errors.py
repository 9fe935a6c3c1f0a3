from __future__ import annotations

from pydantic import BaseModel, ValidationError


class ProfessionServiceError(RuntimeError):
    """Base for every failure a profession operation reports to its caller."""

    def __init__(self, message: str, *, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class Unauthenticated(ProfessionServiceError):
    pass


class InvalidQuery(ProfessionServiceError):
    pass


class ProfessionValidationError(ProfessionServiceError):
    pass


class ProfessionNotFound(ProfessionServiceError):
    pass


class PersistenceError(ProfessionServiceError):
    pass


def _field_label(model: type[BaseModel], key: object) -> str:
    field = model.model_fields.get(str(key))
    if field is not None and field.alias:
        return field.alias
    return str(key)


def format_validation_errors(exc: ValidationError, model: type[BaseModel]) -> str:
    """Collapse every pydantic error into one comma separated message using wire field names."""
    messages: list[str] = []
    for error in exc.errors():
        loc = error.get("loc") or ()
        label = _field_label(model, loc[0]) if loc else "payload"
        if error.get("type") == "missing":
            message = f"{label} is required"
        elif error.get("type") == "value_error":
            message = str(error.get("ctx", {}).get("error") or error.get("msg"))
        else:
            message = f"{label}: {error.get('msg')}"
        if message not in messages:
            messages.append(message)
    return ", ".join(messages)


def validation_failed(exc: ValidationError, model: type[BaseModel]) -> ProfessionValidationError:
    return ProfessionValidationError(format_validation_errors(exc, model))
