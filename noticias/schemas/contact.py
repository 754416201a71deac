# noticias/schemas/contact.py
from pydantic import BaseModel, EmailStr, Field


class ContactForm(BaseModel):
    name: str = Field(min_length=2, max_length=255)
    email: EmailStr
    subject: str = Field(min_length=3, max_length=255)
    message: str = Field(min_length=10, max_length=5000)


class ContactResponse(BaseModel):
    message: str
    id: str
