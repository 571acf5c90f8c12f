"""Response models shared across domains."""

from pydantic import BaseModel


class Message(BaseModel):
    message: str
