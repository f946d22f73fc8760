"""
Ошибки конструктора резюме.

Ни одна из них не фатальна: каждая относится к одному действию пользователя.
Несогласованность "текущая позиция с датой окончания" не ошибка, она нормализуется молча.
"""
from pydantic import BaseModel, ValidationError


class FieldError(BaseModel):
    """Ошибка одного поля формы: путь через точку (experience.0.title) и сообщение."""

    field: str
    message: str


class ResumeValidationError(ValueError):
    """Поле не заполнено или заполнено неверно. Исправляется пользователем."""

    def __init__(self, errors: list[FieldError]):
        self.errors = errors
        summary = "; ".join(f"{e.field}: {e.message}" for e in errors[:3])
        super().__init__(summary or "Validation failed")

    @classmethod
    def from_pydantic(cls, exc: ValidationError, prefix: str = "") -> "ResumeValidationError":
        errors = []
        for err in exc.errors():
            path = ".".join(str(p) for p in err.get("loc", ()))
            if prefix:
                path = f"{prefix}.{path}" if path else prefix
            message = err.get("msg", "Invalid value")
            # pydantic добавляет "Value error, " к сообщениям из валидаторов
            if message.startswith("Value error, "):
                message = message[len("Value error, "):]
            errors.append(FieldError(field=path or "__root__", message=message))
        return cls(errors)


class ExternalServiceError(RuntimeError):
    """AI или хранилище недоступны. Локальное состояние формы не трогаем."""

    def __init__(self, service: str, message: str):
        super().__init__(message)
        self.service = service


class ExportError(RuntimeError):
    """Не удалось собрать PDF. Сессия редактирования продолжается."""
