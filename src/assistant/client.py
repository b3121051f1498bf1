"""Python client for the shopping assistant, mirroring the chat widget.

The client keeps the whole conversation locally and writes it to a JSON
session store after every change, so a new client for the same store picks
up where the last one stopped. Each send posts the text together with the
recent history window, and a cooldown blocks another send for a few seconds.
Network and parse failures never escape: they become an apologetic bot
message in the conversation.
"""

import json
import time
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from uuid import uuid4

import requests
import structlog

from assistant.engine.responder import APOLOGY_TEXT, GREETING_TEXT, trim_history

logger = structlog.get_logger(__name__)

DEFAULT_COOLDOWN_SECONDS = 3
DEFAULT_HISTORY_WINDOW = 6


class SessionStore:
    """A JSON file holding one conversation's messages."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> list[dict] | None:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("assistant.session_store.unreadable", path=str(self.path))
            return None
        return data if isinstance(data, list) else None

    def save(self, messages: list[dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(messages), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


def _message(message_type: str, text: str, **extra) -> dict:
    return {
        "id": str(uuid4()),
        "type": message_type,
        "text": text,
        "created_at": datetime.now(UTC).isoformat(),
        **extra,
    }


class AssistantClient:
    def __init__(
        self,
        base_url: str,
        store: SessionStore | None = None,
        session: requests.Session | None = None,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        history_window: int = DEFAULT_HISTORY_WINDOW,
        timeout: float = 15.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.url = f"{base_url.rstrip('/')}/api/ai/chat"
        self.store = store
        self.session = session or requests.Session()
        self.cooldown_seconds = cooldown_seconds
        self.history_window = history_window
        self.timeout = timeout
        self._clock = clock
        self._last_sent: float | None = None
        self.sending = False

        restored = store.load() if store else None
        self.messages: list[dict] = restored or [_message("bot", GREETING_TEXT)]
        if not restored:
            self._persist()

    # -------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------
    def cooldown_remaining(self) -> float:
        if self._last_sent is None:
            return 0.0
        return max(0.0, self._last_sent + self.cooldown_seconds - self._clock())

    def can_send(self) -> bool:
        return not self.sending and self.cooldown_remaining() == 0

    def _persist(self) -> None:
        if self.store:
            self.store.save(self.messages)

    def _append(self, message: dict) -> dict:
        self.messages.append(message)
        self._persist()
        return message

    def history(self) -> list[dict]:
        return [{"type": m["type"], "text": m.get("text") or ""} for m in trim_history(self.messages, self.history_window)]

    def reset(self) -> None:
        """Start over with just the greeting."""
        self.messages = [_message("bot", GREETING_TEXT)]
        self._last_sent = None
        self._persist()

    # -------------------------------------------------------------------
    # Sending
    # -------------------------------------------------------------------
    def send(self, text: str) -> dict | None:
        """Send ``text`` and return the bot's reply message.

        Returns None without doing anything when the text is blank, a send is
        in flight, or the cooldown has not elapsed.
        """
        text = (text or "").strip()
        if not text or not self.can_send():
            return None

        history = self.history()
        self._append(_message("user", text))
        self.sending = True
        self._last_sent = self._clock()

        try:
            reply = self._post(text, history)
        finally:
            self.sending = False

        return self._append(reply)

    def _post(self, text: str, history: list[dict]) -> dict:
        try:
            resp = self.session.post(self.url, json={"message": text, "history": history}, timeout=self.timeout)
            resp.raise_for_status()
            payload = resp.json()
            structured = payload["structured"]
            products = payload.get("products") or []
            summary = structured.get("summary", "")
        except (requests.RequestException, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("assistant.client.request_failed", error=str(exc))
            return _message("bot", APOLOGY_TEXT, error=True)

        return _message("bot", summary, structured=structured, products=products)
