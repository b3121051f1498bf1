"""FastAPI routes for the shopping assistant — one-shot chat and persistent chat sessions."""

from fastapi import APIRouter, Depends, Request
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from assistant.api.schemas import ChatRequest, ChatResponse, SendMessageRequest, StartSessionResponse
from assistant.chat.messaging import SendChatMessage, StartChat
from assistant.chat.session import ChatSession
from assistant.engine.responder import respond
from catalogue.routes import product_source
from catalogue.source.port import ProductSource
from shared.auth import InvalidToken, decode_token, token_from_request
from shared.settings import get_settings

router = APIRouter(prefix="/api/ai", tags=["assistant"])


def _optional_user_id(request: Request):
    token = token_from_request(request)
    if not token:
        return None
    try:
        return decode_token(token).user_id
    except InvalidToken:
        return None


@router.post("/chat", response_model=ChatResponse)
def chat(body: ChatRequest, source: ProductSource = Depends(product_source)) -> ChatResponse:
    if not body.message.strip():
        raise ValidationError({"message": ["Message cannot be empty"]})

    history = [entry.model_dump() for entry in body.history]
    reply = respond(body.message, history=history, source=source, window=get_settings().chat_history_window)
    return ChatResponse(**reply)


@router.post("/sessions", status_code=201, response_model=StartSessionResponse)
async def start_session(request: Request) -> StartSessionResponse:
    session_id = current_domain.process(StartChat(owner_id=_optional_user_id(request)), asynchronous=False)
    return StartSessionResponse(session_id=session_id)


@router.get("/sessions/{session_id}")
async def get_session(session_id: str):
    session = current_domain.repository_for(ChatSession).get(session_id)
    return session.to_payload()


# Sync: the reply reads the catalogue over blocking HTTP
@router.post("/sessions/{session_id}/messages", response_model=ChatResponse)
def send_message(session_id: str, body: SendMessageRequest) -> ChatResponse:
    reply = current_domain.process(SendChatMessage(session_id=session_id, text=body.message), asynchronous=False)
    return ChatResponse(**reply)
