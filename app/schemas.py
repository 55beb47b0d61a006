from pydantic import BaseModel


class MessageOut(BaseModel):
    """Ответ-подтверждение без тела: {"message": "..."}."""
    message: str
