"""Domain events for the ChatSession aggregate."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from assistant.domain import assistant


@assistant.event(part_of="ChatSession")
class ChatStarted:
    __version__ = 1

    session_id = Identifier(required=True)
    owner_id = Identifier()
    started_at = DateTime(required=True)


@assistant.event(part_of="ChatSession")
class UserMessagePosted:
    """A shopper sent a message to the assistant."""

    __version__ = 1

    session_id = Identifier(required=True)
    message_id = Identifier(required=True)
    text = Text(required=True)
    posted_at = DateTime(required=True)


@assistant.event(part_of="ChatSession")
class AssistantReplied:
    """The assistant answered the shopper's last message."""

    __version__ = 1

    session_id = Identifier(required=True)
    message_id = Identifier(required=True)
    summary = String()
    product_count = Integer(default=0)
    replied_at = DateTime(required=True)
