from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, ClassVar, Iterable, Iterator, Mapping, Optional, Tuple

from shared.log import get_logger
from shared.packets import BroadcastReply, DirectedReply, OutboundRequest

logger = get_logger(__name__)

# Builds the reply for a matched command from the sender's player id
ReplyRule = Callable[[int], OutboundRequest]

BOT_PING = "-bot-ping"
GET_PIZZA = "-get-pizza"

BOT_PING_REPLY = "I am PIZZABOT. Owner: Dominos"
GET_PIZZA_REPLY = "Order airmash pizza here: http://tiny.cc/airmash-pizza . Use code 'Detect' for discounts."


@dataclass(frozen=True)
class WhisperRule:
    """Answers privately to whoever sent the command."""
    text: str
    kind: ClassVar[str] = "whisper"

    def __call__(self, sender_id: int) -> OutboundRequest:
        return DirectedReply(recipient_id=sender_id, text=self.text)


@dataclass(frozen=True)
class ChatRule:
    """Answers on public chat."""
    text: str
    kind: ClassVar[str] = "chat"

    def __call__(self, sender_id: int) -> OutboundRequest:
        return BroadcastReply(text=self.text)


class CommandTable(Mapping[str, ReplyRule]):
    """
    Immutable mapping of exact command strings to reply rules.

    Iteration follows registration order. Build it with ``from_pairs``: a
    command registered twice is rejected there, so the first registration is
    the only one that can ever match.
    """

    def __init__(self, rules: Mapping[str, ReplyRule]) -> None:
        self._rules = MappingProxyType(dict(rules))

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, ReplyRule]]) -> "CommandTable":
        rules: dict = {}
        for command, rule in pairs:
            if command in rules:
                raise ValueError(f"Command {command!r} is already registered")
            rules[command] = rule
        return cls(rules)

    def __getitem__(self, command: str) -> ReplyRule:
        return self._rules[command]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"CommandTable({list(self._rules)!r})"


def default_command_table() -> CommandTable:
    return CommandTable.from_pairs([
        (BOT_PING, WhisperRule(BOT_PING_REPLY)),
        (GET_PIZZA, ChatRule(GET_PIZZA_REPLY)),
    ])


class CommandResponder:
    def __init__(self, table: CommandTable) -> None:
        self.table = table

    def match(self, sender_id: int, text: str) -> Optional[OutboundRequest]:
        """Return the reply for ``text`` if it is exactly a known command."""
        rule = self.table.get(text)
        if rule is None:
            return None
        logger.debug("Matched command %r", text, extra={"player_id": sender_id})
        return rule(sender_id)
