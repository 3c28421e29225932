"""
Text notation for a board layout, modelled on the piece placement part of a FEN string.

Rows are listed from y=0 (black's back rank, top of the screen) to y=7, separated by slashes.
Letters denote pieces (upper case white, lower case black), digits denote runs of empty tiles.

ex. the standard starting layout:
rnbqkbnr/pppppppp/2j5/8/8/5O2/PPPPPPPP/RNBQKBNR
"""

from src.core.config import BOARD_SIZE
from src.core.exceptions import InvalidLayoutError
from src.game.pieces import LAYOUT_TO_PIECE, Piece

STANDARD_LAYOUT = "rnbqkbnr/pppppppp/2j5/8/8/5O2/PPPPPPPP/RNBQKBNR"
EMPTY_LAYOUT = "/".join(["8"] * BOARD_SIZE)

Placement = tuple[int, int, Piece]


def is_valid_layout(layout: str) -> bool:
    """Check the number of rows, and that every row adds up to exactly BOARD_SIZE tiles."""
    rows = layout.split("/")
    if len(rows) != BOARD_SIZE:
        return False

    for row in rows:
        tile_count = 0
        for character in row:
            if character.isdigit():
                tile_count += int(character)
            elif character.lower() in LAYOUT_TO_PIECE:
                tile_count += 1
            else:
                # immediately invalidate if the character is anything else
                return False

        if tile_count != BOARD_SIZE:
            return False
    return True


def parse_layout(layout: str) -> list[Placement]:
    """Return the (x, y, piece) for every piece in the layout"""
    if not is_valid_layout(layout):
        raise InvalidLayoutError(f"Cannot parse board layout: {layout!r}")

    placements: list[Placement] = []
    for y, row in enumerate(layout.split("/")):
        x = 0
        for character in row:
            if character.isdigit():
                x += int(character)
            else:
                placements.append((x, y, Piece.from_layout(character)))
                x += 1
    return placements


def row_to_layout(row: list[Piece | None]) -> str:
    """Layout string of a single row"""
    characters: list[str] = []
    empty_count = 0
    for piece in row:
        if piece is None:
            empty_count += 1
            continue
        if empty_count > 0:
            characters.append(str(empty_count))
            empty_count = 0
        characters.append(piece.to_layout())

    # if the entire row is empty, then we still place this number in the string
    if empty_count > 0:
        characters.append(str(empty_count))
    return "".join(characters)
