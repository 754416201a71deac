# noticias/schemas/subscriber.py
from datetime import datetime
from typing import Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field


class Preferences(BaseModel):
    """Bulletin flags. The public form posts the Spanish names, both are accepted."""
    morning: bool = Field(default=False, validation_alias=AliasChoices("morning", "manana"))
    evening: bool = Field(default=False, validation_alias=AliasChoices("evening", "tarde"))
    weekly: bool = Field(default=False, validation_alias=AliasChoices("weekly", "semanal"))
    sports: bool = Field(default=False, validation_alias=AliasChoices("sports", "deportes"))


class PreferencesUpdate(BaseModel):
    morning: Optional[bool] = Field(default=None, validation_alias=AliasChoices("morning", "manana"))
    evening: Optional[bool] = Field(default=None, validation_alias=AliasChoices("evening", "tarde"))
    weekly: Optional[bool] = Field(default=None, validation_alias=AliasChoices("weekly", "semanal"))
    sports: Optional[bool] = Field(default=None, validation_alias=AliasChoices("sports", "deportes"))


class SubscribeRequest(Preferences):
    email: EmailStr
    name: Optional[str] = Field(default=None, max_length=255)
    source: Optional[str] = Field(default=None, max_length=50)


class SubscriberOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    email: EmailStr
    name: Optional[str] = None
    morning: bool
    evening: bool
    weekly: bool
    sports: bool
    is_active: bool
    is_confirmed: bool
    confirmed_at: Optional[datetime] = None
    subscribed_at: Optional[datetime] = None


class SubscriptionResponse(BaseModel):
    message: str
    email: EmailStr
    is_confirmed: bool


class MessageResponse(BaseModel):
    message: str
