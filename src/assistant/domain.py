"""Assistant bounded context — the rule-based shopping assistant and its chat sessions."""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

assistant = Domain(name="assistant")
