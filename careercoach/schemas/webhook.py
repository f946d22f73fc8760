"""
Схемы вебхуков провайдера идентификации.
"""
from pydantic import BaseModel


class EmailAddress(BaseModel):
    email_address: str


class IdentityUserData(BaseModel):
    """Поле data события user.*. Для user.deleted приходит только id."""

    id: str
    email_addresses: list[EmailAddress] = []
    first_name: str | None = None
    last_name: str | None = None
    image_url: str | None = None

    def primary_email(self) -> str | None:
        return self.email_addresses[0].email_address if self.email_addresses else None

    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class IdentityEvent(BaseModel):
    type: str
    data: IdentityUserData
