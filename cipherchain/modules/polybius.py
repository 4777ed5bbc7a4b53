"""
Polybius-square family: Polybius, ADFGX/ADFGVX, Bifid, Trifid, Nihilist
and Tap code.

All of them share one sub-algorithm: a keyed alphabet laid out as a grid
(5x5 with I/J merged, 6x6 with digits, or a 3x3x3 cube for Trifid) so that
every symbol has a unique coordinate tuple.

Character policy for the whole family: encoding upper-cases the input,
folds J to I on 5x5 grids and DROPS every character that is not in the
grid. Decoding ignores whitespace and rejects any other foreign symbol
with a DecodeError.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from ..framework import Param, TransformModule, register_module

GRID_ALPHABETS = {
    5: "ABCDEFGHIKLMNOPQRSTUVWXYZ",
    6: "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789",
}
FIVE_BY_FIVE_FOLD = {"J": "I"}
COORDINATE_HEADERS = {5: "ADFGX", 6: "ADFGVX"}


def keyed_alphabet(key: str, alphabet: str, fold: Dict[str, str] = None) -> str:
    """
    Key letters first in order of first appearance, then the rest of the
    alphabet. Whitespace in the key is ignored; any other character outside
    the alphabet raises ValueError.
    """
    fold = fold or {}
    head = []
    for c in key.upper():
        if c.isspace():
            continue
        c = fold.get(c, c)
        if c not in alphabet:
            raise ValueError(f"Key character '{c}' is not in the grid alphabet")
        if c not in head:
            head.append(c)
    return "".join(head) + "".join(c for c in alphabet if c not in head)


class PolybiusSquare:
    """A keyed N x N table mapping symbols to zero-based (row, col) pairs."""

    def __init__(self, key: str = "", size: int = 5):
        if size not in GRID_ALPHABETS:
            raise ValueError(f"Grid size must be 5 or 6, got {size}")
        self.size = size
        self.fold = FIVE_BY_FIVE_FOLD if size == 5 else {}
        self.table = keyed_alphabet(key, GRID_ALPHABETS[size], self.fold)
        self._coords = {c: divmod(i, size) for i, c in enumerate(self.table)}

    def normalize(self, c: str) -> str:
        c = c.upper()
        return self.fold.get(c, c)

    def coords(self, c: str) -> Optional[Tuple[int, int]]:
        return self._coords.get(self.normalize(c))

    def coordinates(self, text: str) -> List[Tuple[int, int]]:
        """Coordinates of every grid symbol in text; others are dropped."""
        found = (self.coords(c) for c in text)
        return [pos for pos in found if pos is not None]

    def letter(self, row: int, col: int) -> str:
        if not (0 <= row < self.size and 0 <= col < self.size):
            raise ValueError(f"Coordinate ({row + 1}, {col + 1}) is outside the {self.size}x{self.size} grid")
        return self.table[row * self.size + col]

    def __contains__(self, c: str) -> bool:
        return self.coords(c) is not None


def _blocks(seq: Sequence, period: int):
    if period <= 0:
        period = len(seq) or 1
    for start in range(0, len(seq), period):
        yield seq[start:start + period]


def _clean(text: str) -> str:
    return "".join(text.split())


# ==========================================
#  ALGORITHMS
# ==========================================


def columnar_order(key: str) -> List[int]:
    """Column indices in stable alphabetical order of the key."""
    return sorted(range(len(key)), key=lambda i: (key[i], i))


def columnar_transpose(stream: str, key: str) -> List[str]:
    """Write stream in rows under key, return columns in key order."""
    if not key:
        return [stream]
    columns = [stream[i::len(key)] for i in range(len(key))]
    return [columns[i] for i in columnar_order(key)]


def columnar_untranspose(text: str, key: str) -> str:
    if not key:
        return text
    width = len(key)
    short, extra = divmod(len(text), width)
    lengths = [short + (1 if i < extra else 0) for i in range(width)]
    columns = [""] * width
    pos = 0
    for i in columnar_order(key):
        columns[i] = text[pos:pos + lengths[i]]
        pos += lengths[i]
    rows = []
    for r in range(short + (1 if extra else 0)):
        rows.extend(col[r] for col in columns if r < len(col))
    return "".join(rows)


def bifid_encode(text: str, square: PolybiusSquare, period: int = 0) -> str:
    out = []
    for block in _blocks(square.coordinates(text), period):
        stream = [r for r, _ in block] + [c for _, c in block]
        out.extend(square.letter(stream[i], stream[i + 1]) for i in range(0, len(stream), 2))
    return "".join(out)


def bifid_decode(coords: List[Tuple[int, int]], square: PolybiusSquare, period: int = 0) -> str:
    out = []
    for block in _blocks(coords, period):
        flat = [axis for pos in block for axis in pos]
        rows, cols = flat[:len(block)], flat[len(block):]
        out.extend(square.letter(r, c) for r, c in zip(rows, cols))
    return "".join(out)


def trifid_encode(text: str, cube: str, period: int = 0) -> str:
    index = {c: i for i, c in enumerate(cube)}
    coords = [_cube_coords(index[c]) for c in text.upper() if c in index]
    out = []
    for block in _blocks(coords, period):
        stream = [p[0] for p in block] + [p[1] for p in block] + [p[2] for p in block]
        out.extend(cube[stream[i] * 9 + stream[i + 1] * 3 + stream[i + 2]]
                   for i in range(0, len(stream), 3))
    return "".join(out)


def trifid_decode(symbols: str, cube: str, period: int = 0) -> str:
    index = {c: i for i, c in enumerate(cube)}
    coords = [_cube_coords(index[c]) for c in symbols]
    out = []
    for block in _blocks(coords, period):
        n = len(block)
        flat = [axis for pos in block for axis in pos]
        layers, rows, cols = flat[:n], flat[n:2 * n], flat[2 * n:]
        out.extend(cube[l * 9 + r * 3 + c] for l, r, c in zip(layers, rows, cols))
    return "".join(out)


def _cube_coords(i: int) -> Tuple[int, int, int]:
    return i // 9, (i % 9) // 3, i % 3


def nihilist_values(text: str, square: PolybiusSquare) -> List[int]:
    """One-based two-digit coordinate values: row * 10 + col."""
    return [(r + 1) * 10 + (c + 1) for r, c in square.coordinates(text)]


def nihilist_encode(text: str, square: PolybiusSquare, key_values: List[int]) -> str:
    values = nihilist_values(text, square)
    return " ".join(str(v + key_values[i % len(key_values)]) for i, v in enumerate(values))


# ==========================================
#  MODULES
# ==========================================


class _GridModule(TransformModule):
    """Shared square construction and key validation."""

    def square(self) -> PolybiusSquare:
        try:
            return PolybiusSquare(self.config.get("key", ""), self.config.get("size", 5))
        except ValueError as e:
            raise self.config_error(str(e)) from None

    def validate(self):
        self.square()

    def letter(self, square: PolybiusSquare, row: int, col: int) -> str:
        try:
            return square.letter(row, col)
        except ValueError as e:
            raise self.decode_error(str(e)) from None


@register_module
class PolybiusSquareModule(_GridModule):
    """Letters to one-based row/column digit pairs, space separated."""

    kind = "polybius"
    name = "Polybius Square"
    description = "Keyed 5x5 (I/J merged) or 6x6 (letters and digits) coordinate cipher."
    PARAMS = (
        Param("key", str, "", help="Grid key; placed first, duplicates removed"),
        Param("size", int, 5, help="Grid side: 5 or 6"),
    )

    def encode(self, text: str) -> str:
        square = self.square()
        return " ".join(f"{r + 1}{c + 1}" for r, c in square.coordinates(text))

    def decode(self, text: str) -> str:
        square = self.square()
        digits = _clean(text)
        for c in digits:
            if c not in "0123456789":
                raise self.decode_error(f"Unexpected symbol '{c}' in coordinate stream")
        if len(digits) % 2:
            raise self.decode_error("Odd number of coordinate digits")
        return "".join(self.letter(square, int(digits[i]) - 1, int(digits[i + 1]) - 1)
                       for i in range(0, len(digits), 2))


@register_module
class ADFGXCipherModule(_GridModule):
    """
    ADFGX (5x5) / ADFGVX (6x6).

    Each letter becomes two header letters naming its row and column; the
    resulting stream is written in rows under the transposition key and
    read off by columns in alphabetical key order. Columns are separated
    by a space in the output. An empty transposition key skips the
    transposition step.
    """

    kind = "adfgx"
    name = "ADFGX Cipher"
    description = "Polybius substitution to ADFGX/ADFGVX letters plus keyed columnar transposition."
    PARAMS = (
        Param("key", str, "", help="Polybius grid key"),
        Param("transposition_key", str, "CARGO", help="Columnar transposition keyword"),
        Param("size", int, 5, help="5 for ADFGX, 6 for ADFGVX"),
    )

    def _transposition_key(self) -> str:
        return "".join(self.config["transposition_key"].upper().split())

    def encode(self, text: str) -> str:
        square = self.square()
        headers = COORDINATE_HEADERS[square.size]
        stream = "".join(headers[r] + headers[c] for r, c in square.coordinates(text))
        columns = columnar_transpose(stream, self._transposition_key())
        return " ".join(col for col in columns if col)

    def decode(self, text: str) -> str:
        square = self.square()
        headers = COORDINATE_HEADERS[square.size]
        symbols = _clean(text).upper()
        for c in symbols:
            if c not in headers:
                raise self.decode_error(f"Unexpected symbol '{c}' (expected one of {headers})")
        if len(symbols) % 2:
            raise self.decode_error("Odd number of coordinate letters")
        stream = columnar_untranspose(symbols, self._transposition_key())
        return "".join(self.letter(square, headers.index(stream[i]), headers.index(stream[i + 1]))
                       for i in range(0, len(stream), 2))


@register_module
class BifidCipherModule(_GridModule):
    """
    Bifid: all row indices, then all column indices, re-read as pairs.

    With period > 0 the fractionation runs over consecutive blocks of that
    many letters instead of the whole message.
    """

    kind = "bifid"
    name = "Bifid Cipher"
    description = "5x5 Polybius fractionation: rows then columns re-paired into letters."
    PARAMS = (
        Param("key", str, "", help="Grid key"),
        Param("period", int, 0, help="Block length; 0 fractionates the whole message"),
    )

    def validate(self):
        super().validate()
        if self.config["period"] < 0:
            raise self.config_error("Period must be zero or positive")

    def encode(self, text: str) -> str:
        return bifid_encode(text, self.square(), self.config["period"])

    def decode(self, text: str) -> str:
        square = self.square()
        coords = []
        for c in _clean(text):
            pos = square.coords(c)
            if pos is None:
                raise self.decode_error(f"Unexpected symbol '{c}'")
            coords.append(pos)
        return bifid_decode(coords, square, self.config["period"])


@register_module
class TrifidCipherModule(TransformModule):
    """
    Trifid: 27 symbols (A-Z plus a filler) in a 3x3x3 cube; layer, row and
    column digit streams are fractionated like Bifid.
    """

    kind = "trifid"
    name = "Trifid Cipher"
    description = "3x3x3 cube fractionation over A-Z plus one filler symbol."
    PARAMS = (
        Param("key", str, "", help="Cube key"),
        Param("period", int, 0, help="Block length; 0 fractionates the whole message"),
        Param("filler", str, ".", help="The 27th symbol"),
    )

    def cube(self) -> str:
        filler = self.config["filler"]
        if len(filler) != 1 or filler.isspace() or filler.upper() in GRID_ALPHABETS[6]:
            raise self.config_error("Filler must be a single non-alphanumeric, non-space character")
        try:
            return keyed_alphabet(self.config["key"], GRID_ALPHABETS[6][:26] + filler)
        except ValueError as e:
            raise self.config_error(str(e)) from None

    def validate(self):
        self.cube()
        if self.config["period"] < 0:
            raise self.config_error("Period must be zero or positive")

    def encode(self, text: str) -> str:
        return trifid_encode(text, self.cube(), self.config["period"])

    def decode(self, text: str) -> str:
        cube = self.cube()
        symbols = _clean(text).upper()
        for c in symbols:
            if c not in cube:
                raise self.decode_error(f"Unexpected symbol '{c}'")
        return trifid_decode(symbols, cube, self.config["period"])


@register_module
class NihilistCipherModule(_GridModule):
    """
    Nihilist: two-digit plaintext coordinates plus repeating keyword
    coordinates. Row and column digits add independently without any
    modulus, i.e. 35 + 45 = 80 as an ordinary sum (row 3+4, col 5+5).
    """

    kind = "nihilist"
    name = "Nihilist Cipher"
    description = "Polybius coordinates added to a repeating keyword's coordinates."
    PARAMS = (
        Param("key", str, "", help="Grid key"),
        Param("keyword", str, "KEY", help="Additive keyword"),
    )

    def key_values(self, square: PolybiusSquare) -> List[int]:
        keyword = "".join(self.config["keyword"].split())
        for c in keyword:
            if c not in square:
                raise self.config_error(f"Keyword character '{c}' is not in the grid")
        values = nihilist_values(keyword, square)
        if not values:
            raise self.config_error("Keyword cannot be empty")
        return values

    def validate(self):
        self.key_values(self.square())

    def encode(self, text: str) -> str:
        square = self.square()
        return nihilist_encode(text, square, self.key_values(square))

    def decode(self, text: str) -> str:
        square = self.square()
        key_values = self.key_values(square)
        out = []
        for i, token in enumerate(text.split()):
            try:
                value = int(token)
            except ValueError:
                raise self.decode_error(f"'{token}' is not a number") from None
            row, col = divmod(value - key_values[i % len(key_values)], 10)
            if not (1 <= row <= 5 and 1 <= col <= 5):
                raise self.decode_error(f"'{token}' does not decode to a grid coordinate")
            out.append(square.letter(row - 1, col - 1))
        return "".join(out)


@register_module
class TapCodeModule(_GridModule):
    """
    Tap code over the unkeyed 5x5 grid: each letter is a run of row taps
    and a run of column taps separated by one space; letters are separated
    by two spaces.
    """

    kind = "tap_code"
    name = "Tap Code"
    description = "Polybius coordinates rendered as groups of taps."
    TAP = "."

    def encode(self, text: str) -> str:
        square = self.square()
        return "  ".join(f"{self.TAP * (r + 1)} {self.TAP * (c + 1)}" for r, c in square.coordinates(text))

    def decode(self, text: str) -> str:
        square = self.square()
        counts = []
        for group in text.split():
            if group.strip(self.TAP):
                raise self.decode_error(f"Unexpected symbol in tap group '{group}'")
            if len(group) > square.size:
                raise self.decode_error(f"Tap group of {len(group)} exceeds the grid")
            counts.append(len(group))
        if len(counts) % 2:
            raise self.decode_error("Odd number of tap groups")
        return "".join(self.letter(square, counts[i] - 1, counts[i + 1] - 1)
                       for i in range(0, len(counts), 2))
