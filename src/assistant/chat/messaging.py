"""Chat session commands and handler — start a session and exchange messages."""

from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from assistant.chat.session import ChatSession
from assistant.domain import assistant, logger
from assistant.engine.responder import respond
from catalogue.source import get_source
from shared.settings import get_settings


@assistant.command(part_of="ChatSession")
class StartChat:
    owner_id = Identifier()


@assistant.command(part_of="ChatSession")
class SendChatMessage:
    session_id = Identifier(required=True)
    text = Text(required=True)


@assistant.command_handler(part_of=ChatSession)
class ChatSessionHandler:
    @handle(StartChat)
    def start_chat(self, command):
        session = ChatSession.start(owner_id=command.owner_id)
        current_domain.repository_for(ChatSession).add(session)
        return str(session.id)

    @handle(SendChatMessage)
    def send_message(self, command):
        repo = current_domain.repository_for(ChatSession)
        session = repo.get(command.session_id)

        history = session.history(get_settings().chat_history_window)
        session.post_user_message(command.text)

        reply = respond(command.text, history=history, source=get_source())
        session.add_reply(reply["structured"], reply["products"])
        repo.add(session)

        logger.info(
            "assistant.replied",
            session_id=command.session_id,
            product_count=len(reply["products"]),
        )
        return reply
