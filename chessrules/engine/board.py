from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple

from .errors import IllegalMoveError, MoveError
from .move import (
    NO_TRANSITION,
    OUT_OF_BOARD,
    PROMOTION_PIECES,
    Transition,
    parse_coordinate,
    str_to_square,
)
from .piece import EMPTY, Color, Piece, PieceType, lands_on_board


logger = logging.getLogger(__name__)


STARTPOS_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
EMPTY_FEN = "8/8/8/8/8/8/8/8"

FILES = "abcdefgh"
RANKS = "12345678"

KINGSIDE = "O-O"
QUEENSIDE = "O-O-O"
_CASTLE_TOKENS = {"O-O": KINGSIDE, "0-0": KINGSIDE, "O-O-O": QUEENSIDE, "0-0-0": QUEENSIDE}

# King transition first, rook transition second.
CASTLE_TRANSITIONS: Dict[Tuple[Color, str], Tuple[Transition, Transition]] = {
    (Color.WHITE, KINGSIDE): (Transition(4, 6), Transition(7, 5)),
    (Color.WHITE, QUEENSIDE): (Transition(4, 2), Transition(0, 3)),
    (Color.BLACK, KINGSIDE): (Transition(60, 62), Transition(63, 61)),
    (Color.BLACK, QUEENSIDE): (Transition(60, 58), Transition(56, 59)),
}

SAN_PIECES: Dict[str, PieceType] = {
    "N": PieceType.KNIGHT,
    "B": PieceType.BISHOP,
    "R": PieceType.ROOK,
    "Q": PieceType.QUEEN,
    "K": PieceType.KING,
}


def castle_side(token: str) -> Optional[str]:
    """Return ``"O-O"``/``"O-O-O"`` if ``token`` requests castling, else None."""
    return _CASTLE_TOKENS.get(token.strip().rstrip("!?").rstrip("+#"))


def _is_move_possible(
    piece: Piece, from_sq: int, to_sq: int, squares: Sequence[Piece]
) -> Optional[MoveError]:
    """Check piece geometry and path occupancy, ignoring turn and king safety.

    Returns:
        Optional[MoveError]: None if the move is physically possible.
    """
    offset = to_sq - from_sq
    if offset not in piece.get_moves(from_sq):
        return MoveError.IMPOSSIBLE_MOVE
    if piece.kind is PieceType.KING and abs(offset) == 2:
        # two-file king moves only exist as part of castling
        return MoveError.IMPOSSIBLE_MOVE

    if piece.kind is PieceType.PAWN and abs(offset) in (8, 16):
        if not squares[to_sq].is_none():
            return MoveError.PAWN_BLOCKED
        if abs(offset) == 16 and not squares[from_sq + offset // 2].is_none():
            return MoveError.BLOCKED

    if piece.is_sliding():
        return _find_blocker(piece, from_sq, to_sq, squares)
    return None


def _find_blocker(
    piece: Piece, from_sq: int, to_sq: int, squares: Sequence[Piece]
) -> Optional[MoveError]:
    for step in piece.get_sliding_moves():
        blocked = False
        sq = from_sq
        while lands_on_board(sq, step, 1):
            sq += step
            if sq == to_sq:
                return MoveError.BLOCKED if blocked else None
            if not squares[sq].is_none():
                blocked = True
    return None


def _attacks(piece: Piece, from_sq: int, target: int, squares: Sequence[Piece]) -> bool:
    if piece.kind is PieceType.PAWN:
        # pawns only ever take diagonally
        return (target - from_sq) in piece.pawn_capture_offsets(from_sq)
    return _is_move_possible(piece, from_sq, target, squares) is None


class Board:
    """Mailbox board and rules engine.

    Notes:
    - Squares are 0..63 (a1=0 .. h8=63), +1 per file and +8 per rank.
    - King squares are tracked incrementally, never recomputed by scanning.
    - ``last_transition`` is only consulted for en passant.
    """

    def __init__(self, fen: str = STARTPOS_FEN, color_to_move: Color = Color.WHITE) -> None:
        self._squares: List[Piece] = [EMPTY] * 64
        self._king_positions: Dict[Color, int] = {}
        self.color_to_move: Color = color_to_move
        self.last_transition: Transition = NO_TRANSITION
        self.read_fen(fen)

    @classmethod
    def default(cls) -> "Board":
        """Create a board holding the standard starting position, white to move."""
        return cls()

    @classmethod
    def empty(cls, color_to_move: Color = Color.WHITE) -> "Board":
        return cls(EMPTY_FEN, color_to_move)

    def copy(self) -> "Board":
        """Return an independent copy (squares, king map, turn, last transition)."""
        b = Board.__new__(Board)
        b._squares = self._squares.copy()
        b._king_positions = dict(self._king_positions)
        b.color_to_move = self.color_to_move
        b.last_transition = self.last_transition
        return b

    # --- Read-only accessors ---
    @property
    def squares(self) -> Tuple[Piece, ...]:
        return tuple(self._squares)

    @property
    def king_positions(self) -> Dict[Color, int]:
        return dict(self._king_positions)

    def king_position(self, color: Color) -> Optional[int]:
        return self._king_positions.get(color)

    def piece_at(self, sq: int) -> Piece:
        return self._squares[sq]

    # --- Layout I/O ---
    def read_fen(self, fen: str) -> None:
        """Load a board layout such as ``"rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"``.

        Ranks run from 8 down to 1, files from a to h. All previous state
        (squares, king squares, last transition) is discarded. A second field
        ``w`` or ``b`` sets the side to move; without it the side to move is
        kept.

        Raises:
            ValueError: On an unknown piece letter, a piece placed past the
                edge of the board, or an invalid side-to-move field.
        """
        fields = fen.split()
        if not fields:
            raise ValueError("layout must be a non-empty string")

        squares: List[Piece] = [EMPTY] * 64
        kings: Dict[Color, int] = {}
        rank = 7
        file = 0
        for ch in fields[0]:
            if ch == "/":
                rank -= 1
                file = 0
                if rank < 0:
                    raise ValueError(f"layout has more than 8 ranks: {fen!r}")
            elif ch.isdigit():
                file += int(ch)
                if file > 8:
                    raise ValueError(f"layout does not fit the board: {fen!r}")
            else:
                piece = Piece.from_char(ch)
                if rank < 0 or file > 7:
                    raise ValueError(f"layout does not fit the board: {fen!r}")
                sq = rank * 8 + file
                squares[sq] = piece
                if piece.kind is PieceType.KING:
                    kings[piece.color] = sq
                file += 1

        if len(fields) > 1:
            if fields[1] == "w":
                self.color_to_move = Color.WHITE
            elif fields[1] == "b":
                self.color_to_move = Color.BLACK
            else:
                raise ValueError("side to move must be 'w' or 'b'")

        self._squares = squares
        self._king_positions = kings
        self.last_transition = NO_TRANSITION

    def to_fen(self) -> str:
        """Serialize the layout followed by the side to move, e.g. ``"8/8/... w"``."""
        ranks: List[str] = []
        for rank in range(7, -1, -1):
            run = 0
            row: List[str] = []
            for file in range(8):
                piece = self._squares[rank * 8 + file]
                if piece.is_none():
                    run += 1
                    continue
                if run:
                    row.append(str(run))
                    run = 0
                row.append(piece.visualize())
            if run:
                row.append(str(run))
            ranks.append("".join(row))
        side = "w" if self.color_to_move is Color.WHITE else "b"
        return "/".join(ranks) + " " + side

    # --- Notation translation ---
    def translate_move(self, token: str) -> List[Transition]:
        """Translate a SAN-like token into candidate transitions.

        Castling yields the king and rook transitions (king first). Other
        moves yield one transition per candidate origin square, all sharing the
        destination and promotion; the caller picks the first legal one.

        Args:
            token (str): Move such as ``"Nxe5"``, ``"Qh5+"``, ``"hxg8=Q"``, ``"O-O"``.

        Raises:
            IllegalMoveError: ``INVALID_PIECE`` for an unknown piece letter,
                ``INVALID_MOVE`` for text that does not name a square.
        """
        side = castle_side(token)
        if side is not None:
            return list(CASTLE_TRANSITIONS[(self.color_to_move, side)])

        m = token.strip().rstrip("!?").replace("x", "").replace("+", "").replace("#", "")
        if not m:
            raise IllegalMoveError(MoveError.INVALID_MOVE, token)

        promotion = PieceType.NONE
        if m[0] in FILES:
            if "=" in m:
                m, _, promo = m.partition("=")
                kind = PROMOTION_PIECES.get(promo.lower()) if len(promo) == 1 else None
                if kind is None:
                    raise IllegalMoveError(MoveError.INVALID_PIECE, token)
                promotion = kind
            if len(m) not in (2, 3):
                raise IllegalMoveError(MoveError.INVALID_MOVE, token)
            places = self.find_pawn_places(m[0])
            destination = self._parse_square(m[-2:], token)
        else:
            kind = SAN_PIECES.get(m[0])
            if kind is None:
                raise IllegalMoveError(MoveError.INVALID_PIECE, token)
            rest = m[1:]
            hint = rest[:-2]
            if len(rest) < 2 or len(hint) > 2 or any(c not in FILES + RANKS for c in hint):
                raise IllegalMoveError(MoveError.INVALID_MOVE, token)
            destination = self._parse_square(rest[-2:], token)
            places = self.find_piece_places(kind, self.color_to_move, hint)

        return [Transition(p, destination, promotion) for p in places]

    def find_piece_places(self, kind: PieceType, color: Color, hint: str = "") -> List[int]:
        """Squares holding ``color``'s ``kind``, filtered by a file/rank hint like ``"b"`` or ``"1"``."""
        file: Optional[int] = None
        rank: Optional[int] = None
        for ch in hint:
            if ch in FILES:
                file = FILES.index(ch)
            elif ch in RANKS:
                rank = RANKS.index(ch)
        places: List[int] = []
        for sq, piece in enumerate(self._squares):
            if piece.kind is not kind or piece.color is not color:
                continue
            if file is not None and sq % 8 != file:
                continue
            if rank is not None and sq // 8 != rank:
                continue
            places.append(sq)
        return places

    def find_pawn_places(self, file_letter: str) -> List[int]:
        """Squares of the side to move's pawns on the given file (ranks 1-7)."""
        file = FILES.index(file_letter)
        places: List[int] = []
        for rank in range(7):
            sq = file + 8 * rank
            piece = self._squares[sq]
            if piece.kind is PieceType.PAWN and piece.color is self.color_to_move:
                places.append(sq)
        return places

    @staticmethod
    def _parse_square(text: str, token: str) -> int:
        try:
            return str_to_square(text)
        except ValueError:
            raise IllegalMoveError(MoveError.INVALID_MOVE, token) from None

    # --- Legality ---
    def validate_move(self, from_sq: int, to_sq: int) -> Transition:
        """Check that moving ``from_sq`` -> ``to_sq`` is legal for the side to move.

        Returns:
            Transition: Auxiliary transition to apply alongside the move (the
            removal of a pawn taken en passant), or ``NO_TRANSITION``.

        Raises:
            IllegalMoveError: With the reason the move is refused.
        """
        if not (0 <= from_sq < 64 and 0 <= to_sq < 64):
            raise IllegalMoveError(MoveError.IMPOSSIBLE_MOVE)
        piece = self._squares[from_sq]
        target = self._squares[to_sq]
        if (
            piece.is_none()
            or (not target.is_none() and piece.color is target.color)
            or piece.color is not self.color_to_move
        ):
            raise IllegalMoveError(MoveError.PRECONDITION)

        error = _is_move_possible(piece, from_sq, to_sq, self._squares)
        if error is not None:
            raise IllegalMoveError(error)

        auxiliary = NO_TRANSITION
        if piece.kind is PieceType.PAWN and target.is_none() and abs(to_sq - from_sq) in (7, 9):
            auxiliary = self._resolve_en_passant(piece, to_sq)

        scratch = self._squares.copy()
        kings = dict(self._king_positions)
        scratch[to_sq] = piece
        scratch[from_sq] = EMPTY
        if auxiliary.is_removal():
            scratch[auxiliary.from_sq] = EMPTY
        if piece.kind is PieceType.KING:
            kings[piece.color] = to_sq
        if self.is_check(piece.color, scratch, kings):
            raise IllegalMoveError(MoveError.CHECK)
        return auxiliary

    def _resolve_en_passant(self, pawn: Piece, to_sq: int) -> Transition:
        # the victim stands beside the origin, on the destination's file
        direction = pawn.color.direction
        victim_sq = to_sq - 8 * direction
        victim = self._squares[victim_sq]
        if victim.is_none():
            raise IllegalMoveError(MoveError.PAWN_DIAGONAL_EMPTY)
        if victim.kind is not PieceType.PAWN or victim.color is not pawn.color.opposite():
            raise IllegalMoveError(MoveError.INVALID_EN_PASSANT)
        last = self.last_transition
        if last.to_sq != victim_sq or last.from_sq != victim_sq + 16 * direction:
            raise IllegalMoveError(MoveError.INVALID_EN_PASSANT)
        return Transition(victim_sq, OUT_OF_BOARD)

    def is_square_attacked(
        self, sq: int, by_color: Color, squares: Optional[Sequence[Piece]] = None
    ) -> bool:
        """Whether any ``by_color`` piece could take on ``sq``, blocking included."""
        if squares is None:
            squares = self._squares
        for idx, piece in enumerate(squares):
            if piece.is_none() or piece.color is not by_color:
                continue
            if _attacks(piece, idx, sq, squares):
                return True
        return False

    def is_check(
        self,
        color: Color,
        squares: Optional[Sequence[Piece]] = None,
        king_positions: Optional[Dict[Color, int]] = None,
    ) -> bool:
        """Whether ``color``'s king is attacked. A side without a king is never in check."""
        if king_positions is None:
            king_positions = self._king_positions
        king_sq = king_positions.get(color)
        if king_sq is None:
            return False
        return self.is_square_attacked(king_sq, color.opposite(), squares)

    def validate_castle(self, king_pos: int, rook_pos: int) -> bool:
        """Neither piece has moved and every index strictly between them is empty."""
        if self._squares[king_pos].has_moved or self._squares[rook_pos].has_moved:
            return False
        for sq in range(min(king_pos, rook_pos) + 1, max(king_pos, rook_pos)):
            if not self._squares[sq].is_none():
                return False
        return True

    def _check_castle(self, king_move: Transition, rook_move: Transition) -> None:
        color = self.color_to_move
        king = self._squares[king_move.from_sq]
        rook = self._squares[rook_move.from_sq]
        if (
            king.kind is not PieceType.KING
            or rook.kind is not PieceType.ROOK
            or king.color is not color
            or rook.color is not color
        ):
            raise IllegalMoveError(MoveError.INVALID_CASTLE)
        if not self.validate_castle(king_move.from_sq, rook_move.from_sq):
            raise IllegalMoveError(MoveError.INVALID_CASTLE)
        # the king may not castle out of, through, or into check
        step = 1 if king_move.to_sq > king_move.from_sq else -1
        for sq in range(king_move.from_sq, king_move.to_sq + step, step):
            if self.is_square_attacked(sq, color.opposite()):
                raise IllegalMoveError(MoveError.INVALID_CASTLE)

    def _resolve_promotion(self, transition: Transition) -> Transition:
        piece = self._squares[transition.from_sq]
        last_rank = transition.to_sq // 8 in (0, 7)
        if piece.kind is PieceType.PAWN and last_rank:
            if transition.promotion is PieceType.NONE:
                return replace(transition, promotion=PieceType.QUEEN)
            return transition
        if transition.promotion is not PieceType.NONE:
            raise IllegalMoveError(MoveError.IMPOSSIBLE_MOVE)
        return transition

    # --- Application ---
    def make_move(self, transition: Transition, swap_color: bool = True) -> None:
        """Apply ``transition`` without validating it.

        A transition to ``OUT_OF_BOARD`` clears its origin and leaves the turn
        and ``last_transition`` untouched.
        """
        if transition.is_none():
            return
        if transition.to_sq == OUT_OF_BOARD:
            self._squares[transition.from_sq] = EMPTY
            return

        piece = self._squares[transition.from_sq]
        kind = piece.kind if transition.promotion is PieceType.NONE else transition.promotion
        moved = replace(piece, kind=kind, has_moved=True)
        self._squares[transition.to_sq] = moved
        self._squares[transition.from_sq] = EMPTY
        if moved.kind is PieceType.KING:
            self._king_positions[moved.color] = transition.to_sq
        self.last_transition = transition
        if swap_color:
            self.swap_color_to_move()

    def swap_color_to_move(self) -> None:
        self.color_to_move = self.color_to_move.opposite()

    def _castle(self, king_move: Transition, rook_move: Transition) -> None:
        self._check_castle(king_move, rook_move)
        self.make_move(king_move, swap_color=False)
        self.make_move(rook_move, swap_color=False)
        self.swap_color_to_move()

    def _apply(self, transition: Transition, auxiliary: Transition) -> None:
        if not auxiliary.is_none():
            self.make_move(auxiliary, swap_color=False)
        self.make_move(transition)

    def make_pgn_move(self, token: str) -> None:
        """Translate, validate and apply one SAN-like move for the side to move.

        Raises:
            IllegalMoveError: ``INVALID_CASTLE`` for a refused castle,
                ``INVALID_MOVE`` if no candidate origin yields a legal move, or
                a translation failure.
        """
        transitions = self.translate_move(token)
        if castle_side(token) is not None:
            king_move, rook_move = transitions
            self._castle(king_move, rook_move)
            logger.debug("castled %s for %s", token, self.color_to_move.opposite().name)
            return

        for candidate in transitions:
            try:
                auxiliary = self.validate_move(candidate.from_sq, candidate.to_sq)
                transition = self._resolve_promotion(candidate)
            except IllegalMoveError as e:
                logger.debug("candidate %s rejected: %s", candidate.to_coordinate(), e.reason.value)
                continue
            self._apply(transition, auxiliary)
            logger.debug("applied %s as %s", token, transition.to_coordinate())
            return
        raise IllegalMoveError(MoveError.INVALID_MOVE, token)

    def make_coordinate_move(self, text: str) -> None:
        """Validate and apply a move in coordinate notation (``"e2e4"``, ``"e7e8q"``).

        A two-file king move is played as castling.

        Raises:
            IllegalMoveError: ``INVALID_NOTATION`` for unparsable text, or the
                reason the move is refused.
        """
        transition = parse_coordinate(text)
        piece = self._squares[transition.from_sq]
        offset = transition.to_sq - transition.from_sq
        if piece.kind is PieceType.KING and piece.color is self.color_to_move and abs(offset) == 2:
            side = KINGSIDE if offset > 0 else QUEENSIDE
            king_move, rook_move = CASTLE_TRANSITIONS[(self.color_to_move, side)]
            if king_move.from_sq != transition.from_sq:
                raise IllegalMoveError(MoveError.INVALID_CASTLE, text)
            self._castle(king_move, rook_move)
            return

        auxiliary = self.validate_move(transition.from_sq, transition.to_sq)
        self._apply(self._resolve_promotion(transition), auxiliary)
        logger.debug("applied %s", transition.to_coordinate())

    def __repr__(self) -> str:
        return f"Board({self.to_fen()!r})"
