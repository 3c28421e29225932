"""
Client -> server actions, and their binary encoding.

The first byte is the action type:

* 0x01 move:    [0x01, source tile id, target tile id, promotion byte (reserved, unused)]
* 0x02 card:    [0x02, number of selections, card type, tile id 0, ..., tile id n-1]
* 0x03 concede: [0x03]
* 0x04 resync:  [0x04]
* 0x05 decline the active card: [0x05]
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar, Self

from src.core.exceptions import InvalidActionError
from src.game.cards import CardType
from src.game.tile import is_valid_tile_id

MOVE_LENGTH = 4
CARD_HEADER_LENGTH = 3


class ActionKind(IntEnum):
    MOVE = 0x01
    CARD = 0x02
    CONCEDE = 0x03
    RESYNC = 0x04
    DECLINE = 0x05


def _check_tile_ids(tile_ids: list[int]) -> None:
    for tile_id in tile_ids:
        if not is_valid_tile_id(tile_id):
            raise InvalidActionError(f"Tile id {tile_id} is not on the board")


@dataclass(frozen=True)
class MoveAction:
    kind: ClassVar[ActionKind] = ActionKind.MOVE

    source: int
    target: int
    promotion: int = 0x00

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        if len(data) != MOVE_LENGTH:
            raise InvalidActionError(f"Move action must be {MOVE_LENGTH} bytes, got {len(data)}")
        _, source, target, promotion = data
        _check_tile_ids([source, target])
        return cls(source, target, promotion)

    def to_bytes(self) -> bytes:
        return bytes([self.kind, self.source, self.target, self.promotion])


@dataclass(frozen=True)
class CardAction:
    kind: ClassVar[ActionKind] = ActionKind.CARD

    card_type: CardType
    selections: tuple[int, ...]

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        if len(data) < CARD_HEADER_LENGTH:
            raise InvalidActionError("Card action is missing its header")
        _, count, card_code = data[:CARD_HEADER_LENGTH]
        selections = list(data[CARD_HEADER_LENGTH:])
        if len(selections) != count:
            raise InvalidActionError(
                f"Card action announces {count} selections but carries {len(selections)}"
            )
        if card_code not in {card.value for card in CardType}:
            raise InvalidActionError(f"Unknown card type: {card_code:#04x}")
        _check_tile_ids(selections)
        return cls(CardType(card_code), tuple(selections))

    def to_bytes(self) -> bytes:
        return bytes([self.kind, len(self.selections), self.card_type, *self.selections])


@dataclass(frozen=True)
class ConcedeAction:
    kind: ClassVar[ActionKind] = ActionKind.CONCEDE

    def to_bytes(self) -> bytes:
        return bytes([self.kind])


@dataclass(frozen=True)
class ResyncAction:
    kind: ClassVar[ActionKind] = ActionKind.RESYNC

    def to_bytes(self) -> bytes:
        return bytes([self.kind])


@dataclass(frozen=True)
class DeclineAction:
    kind: ClassVar[ActionKind] = ActionKind.DECLINE

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        if len(data) != 1:
            raise InvalidActionError("Decline action is a single byte")
        return cls()

    def to_bytes(self) -> bytes:
        return bytes([self.kind])


Action = MoveAction | CardAction | ConcedeAction | ResyncAction | DeclineAction


def decode_action(data: bytes | bytearray | list[int]) -> Action:
    """Parse the binary message. Raises InvalidActionError on anything malformed."""
    try:
        raw = bytes(data)
    except (TypeError, ValueError) as e:
        raise InvalidActionError(f"Action is not a byte sequence: {e}") from e

    if not raw:
        raise InvalidActionError("Empty action")

    match raw[0]:
        case ActionKind.MOVE:
            return MoveAction.from_bytes(raw)
        case ActionKind.CARD:
            return CardAction.from_bytes(raw)
        case ActionKind.CONCEDE:
            # no payload to check: conceding is always allowed
            return ConcedeAction()
        case ActionKind.RESYNC:
            return ResyncAction()
        case ActionKind.DECLINE:
            return DeclineAction.from_bytes(raw)
        case unknown:
            raise InvalidActionError(f"Unknown action type: {unknown:#04x}")


def encode_action(action: Action) -> bytes:
    return action.to_bytes()
