"""ChatSession aggregate — the assistant conversation behind the chat widget.

Messages are only ever appended. A session moves from idle to sending when
the shopper posts a message, and stays in its cooldown window for
``CHAT_COOLDOWN_SECONDS`` afterwards. A second message inside that window is
rejected with ``RateLimited``.
"""

import json
from datetime import UTC, datetime, timedelta
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, String, Text

from assistant.chat.events import AssistantReplied, ChatStarted, UserMessagePosted
from assistant.domain import assistant
from assistant.engine.responder import GREETING_TEXT
from shared.errors import RateLimited
from shared.settings import get_settings

MAX_MESSAGE_LENGTH = 1000


class MessageType(Enum):
    USER = "user"
    BOT = "bot"


@assistant.entity(part_of="ChatSession")
class ChatMessage:
    message_type = String(required=True, choices=MessageType)
    text = Text()
    structured = Text()  # JSON: structured reply, bot messages only
    products = Text()  # JSON: product cards, bot messages only
    created_at = DateTime(required=True)

    def to_payload(self):
        payload = {
            "id": str(self.id),
            "type": self.message_type,
            "text": self.text,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if self.structured:
            payload["structured"] = json.loads(self.structured)
        if self.products:
            payload["products"] = json.loads(self.products)
        return payload


@assistant.aggregate
class ChatSession:
    owner_id = Identifier()
    messages = HasMany(ChatMessage)
    last_sent_at = DateTime()
    created_at = DateTime()

    @classmethod
    def start(cls, owner_id=None):
        """A new session opens with the assistant's greeting."""
        now = datetime.now(UTC)
        session = cls(owner_id=owner_id, created_at=now)
        session.add_messages(ChatMessage(message_type=MessageType.BOT.value, text=GREETING_TEXT, created_at=now))
        session.raise_(ChatStarted(session_id=str(session.id), owner_id=owner_id, started_at=now))
        return session

    # -------------------------------------------------------------------
    # Cooldown
    # -------------------------------------------------------------------
    @staticmethod
    def cooldown():
        return timedelta(seconds=get_settings().chat_cooldown_seconds)

    def cooldown_remaining(self, now=None):
        if not self.last_sent_at:
            return 0.0
        now = now or datetime.now(UTC)
        remaining = (self.last_sent_at + self.cooldown() - now).total_seconds()
        return max(0.0, remaining)

    def is_cooling_down(self, now=None):
        return self.cooldown_remaining(now) > 0

    # -------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------
    def post_user_message(self, text, now=None):
        text = (text or "").strip()
        if not text:
            raise ValidationError({"message": ["Message cannot be empty"]})
        if len(text) > MAX_MESSAGE_LENGTH:
            raise ValidationError({"message": [f"Message is longer than {MAX_MESSAGE_LENGTH} characters"]})

        now = now or datetime.now(UTC)
        remaining = self.cooldown_remaining(now)
        if remaining > 0:
            raise RateLimited({"message": [f"Please wait {remaining:.0f}s before sending another message"]})

        message = ChatMessage(message_type=MessageType.USER.value, text=text, created_at=now)
        self.add_messages(message)
        self.last_sent_at = now
        self.raise_(
            UserMessagePosted(
                session_id=str(self.id),
                message_id=str(message.id),
                text=text,
                posted_at=now,
            )
        )
        return message

    def add_reply(self, structured, products=None, now=None):
        now = now or datetime.now(UTC)
        message = ChatMessage(
            message_type=MessageType.BOT.value,
            text=structured.get("summary") or "",
            structured=json.dumps(structured),
            products=json.dumps(products or []),
            created_at=now,
        )
        self.add_messages(message)
        self.raise_(
            AssistantReplied(
                session_id=str(self.id),
                message_id=str(message.id),
                summary=structured.get("summary"),
                product_count=len(products or []),
                replied_at=now,
            )
        )
        return message

    def ordered_messages(self):
        return sorted(self.messages or [], key=lambda m: m.created_at)

    def history(self, window):
        """The last ``window`` messages in the form the responder reads."""
        recent = self.ordered_messages()[-window:] if window > 0 else []
        return [{"type": m.message_type, "text": m.text or ""} for m in recent]

    def to_payload(self):
        return {
            "id": str(self.id),
            "owner_id": str(self.owner_id) if self.owner_id else None,
            "messages": [m.to_payload() for m in self.ordered_messages()],
            "cooldown_remaining": self.cooldown_remaining(),
        }
