"""Pydantic request/response schemas for the Assistant API."""

from pydantic import BaseModel, Field


class HistoryEntry(BaseModel):
    type: str = Field(pattern="^(user|bot)$")
    text: str = ""


class ChatRequest(BaseModel):
    message: str = Field(..., max_length=1000)
    history: list[HistoryEntry] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "message": "Show me electronics under 500",
                    "history": [{"type": "bot", "text": "Hi! Looking for something specific?"}],
                }
            ]
        }
    }


class ChatResponse(BaseModel):
    structured: dict
    products: list[dict]


class StartSessionResponse(BaseModel):
    session_id: str


class SendMessageRequest(BaseModel):
    message: str = Field(..., max_length=1000)
