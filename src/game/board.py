"""The Board owns the tiles and every piece, and keeps the references between them consistent."""

from collections import Counter
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Iterator, Optional, Self

from src.core.config import BOARD_SIZE
from src.core.exceptions import OccupiedTileError
from src.core.shared_types import Color, PieceType
from src.game.layout import STANDARD_LAYOUT, parse_layout, row_to_layout
from src.game.pieces import Piece, PieceState
from src.game.tile import Tile, from_tile_id, is_valid_tile_id


def _create_tiles() -> list[Tile]:
    """Index in the list equals the tile id"""
    return [Tile(x, y) for y in range(BOARD_SIZE) for x in range(BOARD_SIZE)]


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


@dataclass
class Board:
    tiles: list[Tile] = field(default_factory=_create_tiles)
    # dead pieces stay in here (graveyard), they just lose their tile
    pieces: list[Piece] = field(default_factory=list)

    @classmethod
    def from_layout(cls, layout: str) -> Self:
        """Construct a board from a layout string (see layout.py)"""
        board = cls()
        for x, y, piece in parse_layout(layout):
            tile = board.tile_at(x, y)
            # for the typechecker: parse_layout only produces coordinates on the board
            assert tile is not None
            board.place(piece, tile)
        return board

    @classmethod
    def standard(cls) -> Self:
        return cls.from_layout(STANDARD_LAYOUT)

    def to_layout(self) -> str:
        rows = [
            row_to_layout([self.tiles[y * BOARD_SIZE + x].piece for x in range(BOARD_SIZE)])
            for y in range(BOARD_SIZE)
        ]
        return "/".join(rows)

    # --- TILE ACCESS ---
    def tile_at(self, x: int, y: int) -> Optional[Tile]:
        if not (0 <= x < BOARD_SIZE and 0 <= y < BOARD_SIZE):
            return None
        return self.tiles[y * BOARD_SIZE + x]

    def tile_by_id(self, tile_id: int) -> Optional[Tile]:
        if not is_valid_tile_id(tile_id):
            return None
        x, y = from_tile_id(tile_id)
        return self.tile_at(x, y)

    def piece_at(self, x: int, y: int) -> Optional[Piece]:
        tile = self.tile_at(x, y)
        return tile.piece if tile else None

    def occupied_tiles(self) -> Iterator[Tile]:
        return (tile for tile in self.tiles if tile.piece is not None)

    # --- MUTATIONS ---
    def add_piece(self, piece: Piece) -> None:
        """Register the piece with the board (does not put it on a tile)"""
        if not any(existing is piece for existing in self.pieces):
            self.pieces.append(piece)

    def occupy(self, tile: Tile, piece: Piece) -> None:
        if tile.piece is not None:
            raise OccupiedTileError(
                f"Tile ({tile.x},{tile.y}) already holds a {tile.piece.color} {tile.piece.type}"
            )
        tile.piece = piece
        piece.tile = tile

    def clear(self, tile: Tile) -> None:
        if tile.piece is not None:
            tile.piece.tile = None
        tile.piece = None

    def place(self, piece: Piece, tile: Tile) -> None:
        """Setup helper: register a new piece and put it on the tile"""
        self.add_piece(piece)
        self.occupy(tile, piece)

    def move(self, piece: Piece, tile: Tile) -> None:
        if piece.tile is not None:
            self.clear(piece.tile)
        self.occupy(tile, piece)

    def kill(self, piece: Piece) -> None:
        if piece.tile is not None:
            self.clear(piece.tile)
        piece.state = PieceState.DEAD

    def discard(self, piece: Piece) -> None:
        """Take the piece off the board without counting it as captured"""
        if piece.tile is not None:
            self.clear(piece.tile)
        self.pieces = [existing for existing in self.pieces if existing is not piece]

    def transform(self, piece: Piece, new_type: PieceType) -> Piece:
        """
        Replace the piece by a fresh piece of the new type and the same color, on the same tile.

        NOTE: the old piece is dropped from the board entirely. It was not captured, so it should not show up in the graveyard.
        """
        tile = piece.tile
        # for the typechecker: only pieces on the board get transformed
        assert tile is not None
        self.discard(piece)
        new_piece = Piece(new_type, piece.color)
        self.place(new_piece, tile)
        return new_piece

    # --- GEOMETRY ---
    def is_path_clear(self, from_tile: Tile, to_tile: Tile) -> bool:
        """
        Walk from one tile to the other in unit steps, and check none of the tiles in between is occupied.

        NOTE: the tiles must be on the same row, column, or diagonal. The end points themselves are not checked.
        """
        dx = _sign(to_tile.x - from_tile.x)
        dy = _sign(to_tile.y - from_tile.y)
        x = from_tile.x + dx
        y = from_tile.y + dy
        while (x, y) != (to_tile.x, to_tile.y):
            tile = self.tile_at(x, y)
            if tile is None or tile.piece is not None:
                return False
            x += dx
            y += dy
        return True

    # --- SNAPSHOTS ---
    def snapshot(self) -> "Board":
        """Deep copy: the copied tiles and pieces point at each other, never at the original ones"""
        return deepcopy(self)

    def restore(self, snapshot: "Board") -> None:
        """Make this board equal to the snapshot. The snapshot itself stays usable."""
        restored = deepcopy(snapshot)
        self.tiles = restored.tiles
        self.pieces = restored.pieces

    # --- QUERIES ---
    def live_pieces(self, color: Optional[Color] = None) -> list[Piece]:
        return [
            piece
            for piece in self.pieces
            if piece.is_alive and (color is None or piece.color == color)
        ]

    def locate(self, piece_type: PieceType, color: Optional[Color] = None) -> list[Piece]:
        return [piece for piece in self.live_pieces(color) if piece.type == piece_type]

    def has_king(self, color: Color) -> bool:
        return bool(self.locate(PieceType.KING, color))

    def graveyard(self, color: Color) -> dict[PieceType, int]:
        """Tally the captured pieces of the given color"""
        dead = Counter(
            piece.type
            for piece in self.pieces
            if piece.color == color and piece.state == PieceState.DEAD
        )
        return {piece_type: dead[piece_type] for piece_type in PieceType}

    def reversed_pawn_tiles(self) -> list[int]:
        """Tile ids of the live pawns under the Topsy Turvy effect"""
        return sorted(
            piece.tile.id
            for piece in self.locate(PieceType.PAWN)
            if piece.reversed_movement and piece.tile is not None
        )

    def reset_tile_states(self) -> None:
        for tile in self.tiles:
            tile.reset_state()
