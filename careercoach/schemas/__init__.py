# schemas: Pydantic-модели для запроса/ответа API. Валидация и сериализация из коробки.
from careercoach.schemas.common import ErrorResponse, FieldErrorItem, SuccessResponse

__all__ = ["SuccessResponse", "ErrorResponse", "FieldErrorItem"]
