"""
Text and byte encodings: Base64, Base32, Ascii85, Baudot, Unicode code
points, URL, integer bytes and Braille.

Byte-oriented encodings operate on the UTF-8 bytes of the input; their
decoders fail the stage when the decoded bytes are not valid UTF-8.
"""

import base64
from typing import List, Sequence
from urllib.parse import quote, unquote_plus

from ..ecc import DEFAULT_ECC_SYMBOLS, ECCError, ErrorCorrection
from ..framework import Param, TransformModule, register_module


class _BytesModule(TransformModule):

    def utf8(self, data: bytes) -> str:
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise self.decode_error(f"Decoded bytes are not valid UTF-8 ({e.reason} at byte {e.start})") from None


# ==========================================
#  BASE-N
# ==========================================


@register_module
class Base64Module(_BytesModule):
    kind = "base64"
    name = "Base64"
    description = "RFC 4648 Base64 (standard or URL-safe alphabet)."
    PARAMS = (
        Param("url_safe", bool, False, help="Use '-' and '_' instead of '+' and '/'"),
    )

    def encode(self, text: str) -> str:
        data = self.utf8_bytes(text)
        if self.config["url_safe"]:
            return base64.urlsafe_b64encode(data).decode("ascii")
        return base64.b64encode(data).decode("ascii")

    def decode(self, text: str) -> str:
        payload = "".join(text.split())
        if self.config["url_safe"]:
            payload = payload.replace("-", "+").replace("_", "/")
        # binascii.Error is a ValueError; non-ASCII input raises a plain one
        try:
            return self.utf8(base64.b64decode(payload, validate=True))
        except ValueError as e:
            raise self.decode_error(f"Invalid Base64: {e}") from None


@register_module
class Base32Module(_BytesModule):
    kind = "base32"
    name = "Base32"
    description = "RFC 4648 Base32."

    def encode(self, text: str) -> str:
        return base64.b32encode(self.utf8_bytes(text)).decode("ascii")

    def decode(self, text: str) -> str:
        try:
            return self.utf8(base64.b32decode("".join(text.split()), casefold=True))
        except ValueError as e:
            raise self.decode_error(f"Invalid Base32: {e}") from None


@register_module
class Ascii85Module(_BytesModule):
    """Adobe-framed Ascii85 (<~ ... ~>); the frame is optional on decode."""

    kind = "ascii85"
    name = "Ascii85"
    description = "Ascii85 with Adobe <~ ~> framing."

    def encode(self, text: str) -> str:
        return base64.a85encode(self.utf8_bytes(text), adobe=True).decode("ascii")

    def decode(self, text: str) -> str:
        payload = text.strip()
        framed = payload.startswith("<~") and payload.endswith("~>")
        try:
            return self.utf8(base64.a85decode(payload, adobe=framed))
        except ValueError as e:
            raise self.decode_error(f"Invalid Ascii85: {e}") from None


# ==========================================
#  BAUDOT (ITA2)
# ==========================================

LETTER_SHIFT = 0b11111
FIGURE_SHIFT = 0b11011

BAUDOT_LETTERS = {
    "A": 0b00011, "B": 0b11001, "C": 0b01110, "D": 0b01001, "E": 0b00001,
    "F": 0b01101, "G": 0b11010, "H": 0b10100, "I": 0b00110, "J": 0b01011,
    "K": 0b01111, "L": 0b10010, "M": 0b11100, "N": 0b01100, "O": 0b11000,
    "P": 0b10110, "Q": 0b10111, "R": 0b01010, "S": 0b00101, "T": 0b10000,
    "U": 0b00111, "V": 0b11110, "W": 0b10011, "X": 0b11101, "Y": 0b10101,
    "Z": 0b10001, " ": 0b00100, "\r": 0b01000, "\n": 0b00010,
}

BAUDOT_FIGURES = {
    "-": 0b00011, "?": 0b11001, ":": 0b01110, "$": 0b01001, "3": 0b00001,
    "!": 0b01101, "&": 0b11010, "#": 0b10100, "8": 0b00110, "'": 0b01011,
    "(": 0b01111, ")": 0b10010, ".": 0b11100, ",": 0b01100, "9": 0b11000,
    "0": 0b10110, "1": 0b10111, "4": 0b01010, "/": 0b00101, "5": 0b10000,
    "7": 0b00111, "=": 0b11110, "2": 0b10011, "+": 0b11101, "6": 0b10101,
    '"': 0b10001, " ": 0b00100, "\r": 0b01000, "\n": 0b00010,
}

_LETTERS_BY_CODE = {v: k for k, v in BAUDOT_LETTERS.items()}
_FIGURES_BY_CODE = {v: k for k, v in BAUDOT_FIGURES.items()}


@register_module
class BaudotCodeModule(TransformModule):
    """
    ITA2 five-bit code with letter/figure shift codes. Characters with no
    ITA2 code are dropped; letters decode upper case.
    """

    kind = "baudot"
    name = "Baudot Code"
    description = "ITA2 five-bit teleprinter code, space separated binary groups."

    def encode(self, text: str) -> str:
        codes = []
        in_figures = False
        for c in text.upper():
            if c in BAUDOT_LETTERS:
                if in_figures and c not in BAUDOT_FIGURES:
                    codes.append(LETTER_SHIFT)
                    in_figures = False
                codes.append(BAUDOT_LETTERS[c])
            elif c in BAUDOT_FIGURES:
                if not in_figures:
                    codes.append(FIGURE_SHIFT)
                    in_figures = True
                codes.append(BAUDOT_FIGURES[c])
        return " ".join(f"{code:05b}" for code in codes)

    def decode(self, text: str) -> str:
        out = []
        in_figures = False
        for group in text.split():
            if len(group) != 5 or group.strip("01"):
                raise self.decode_error(f"'{group}' is not a five-bit group")
            code = int(group, 2)
            if code == LETTER_SHIFT:
                in_figures = False
            elif code == FIGURE_SHIFT:
                in_figures = True
            else:
                table = _FIGURES_BY_CODE if in_figures else _LETTERS_BY_CODE
                if code not in table:
                    raise self.decode_error(f"Code {group} is unassigned")
                out.append(table[code])
        return "".join(out)


# ==========================================
#  CODE POINTS, URL, INTEGER
# ==========================================

SURROGATE_FIRST, SURROGATE_LAST = 0xD800, 0xDFFF


@register_module
class UnicodeCodePointsModule(TransformModule):
    kind = "unicode"
    name = "Unicode Code Points"
    description = "Characters as U+XXXX code point notation."

    def encode(self, text: str) -> str:
        return " ".join(f"U+{ord(c):04X}" for c in text)

    def decode(self, text: str) -> str:
        out = []
        for token in text.split():
            digits = token[2:] if token[:2] in ("U+", "u+") else token
            try:
                value = int(digits, 16)
                char = chr(value)
            except (ValueError, OverflowError):
                raise self.decode_error(f"'{token}' is not a code point") from None
            if SURROGATE_FIRST <= value <= SURROGATE_LAST:
                raise self.decode_error(f"'{token}' is a surrogate, not a character")
            out.append(char)
        return "".join(out)


@register_module
class UrlEncodingModule(_BytesModule):
    """Percent-encodes UTF-8 bytes except RFC 3986 unreserved characters."""

    kind = "url"
    name = "URL Encoding"
    description = "Percent encoding; '+' decodes to a space."

    def encode(self, text: str) -> str:
        return quote(self.utf8_bytes(text), safe="")

    def decode(self, text: str) -> str:
        try:
            return unquote_plus(text, errors="strict")
        except UnicodeDecodeError as e:
            raise self.decode_error(f"Percent escapes are not valid UTF-8 ({e.reason})") from None


@register_module
class IntegerModule(_BytesModule):
    kind = "integer"
    name = "Integer"
    description = "UTF-8 bytes as space separated decimal or hexadecimal numbers."
    PARAMS = (
        Param("base", str, "decimal", choices=("decimal", "hex")),
    )

    def encode(self, text: str) -> str:
        fmt = "{:d}" if self.config["base"] == "decimal" else "{:02X}"
        return " ".join(fmt.format(b) for b in self.utf8_bytes(text))

    def decode(self, text: str) -> str:
        radix = 10 if self.config["base"] == "decimal" else 16
        data = bytearray()
        for token in text.split():
            try:
                value = int(token, radix)
            except ValueError:
                raise self.decode_error(f"'{token}' is not a {self.config['base']} number") from None
            if not 0 <= value <= 0xFF:
                raise self.decode_error(f"'{token}' is not a byte value")
            data.append(value)
        return self.utf8(bytes(data))


# ==========================================
#  BRAILLE (zig-zag 8-dot cells, optional ECC)
# ==========================================

BRAILLE_BASE = 0x2800

# bit i of a byte raises dot ORDER[i]; even cells zig, odd cells zag
ZIG_ORDER = (1, 2, 3, 7, 4, 5, 6, 8)
ZAG_ORDER = (4, 5, 6, 8, 1, 2, 3, 7)


def dot_masks(order: Sequence[int]) -> List[int]:
    """Cell dot mask for every byte value under one bit-to-dot order."""
    return [sum(1 << (dot - 1) for bit, dot in enumerate(order) if value >> bit & 1)
            for value in range(256)]


CELL_MASKS = (dot_masks(ZIG_ORDER), dot_masks(ZAG_ORDER))
CELL_BYTES = tuple({mask: value for value, mask in enumerate(masks)} for masks in CELL_MASKS)


@register_module
class BrailleModule(_BytesModule):
    """
    Each byte becomes one 8-dot Braille cell (U+2800 - U+28FF). Bits map to
    dots in alternating zig/zag orders on even and odd positions, and the
    payload can be protected with Reed-Solomon parity symbols.
    """

    kind = "braille"
    name = "Braille"
    description = "Bytes as zig-zag 8-dot Braille cells with optional Reed-Solomon ECC."
    PARAMS = (
        Param("ecc_symbols", int, DEFAULT_ECC_SYMBOLS, help="Reed-Solomon parity bytes; 0 disables ECC"),
    )

    def validate(self):
        try:
            ErrorCorrection.check_symbols(self.config["ecc_symbols"])
        except ECCError as e:
            raise self.config_error(str(e)) from None

    def to_cells(self, data: bytes) -> str:
        return "".join(chr(BRAILLE_BASE + CELL_MASKS[i % 2][b]) for i, b in enumerate(data))

    def from_cells(self, text: str) -> bytes:
        data = bytearray()
        for i, cell in enumerate("".join(text.split())):
            mask = ord(cell) - BRAILLE_BASE
            if not 0 <= mask <= 0xFF:
                raise self.decode_error(f"{cell!r} is not a Braille cell")
            data.append(CELL_BYTES[i % 2][mask])
        return bytes(data)

    def encode(self, text: str) -> str:
        if not text:
            return ""
        data = ErrorCorrection.encode(self.utf8_bytes(text), self.config["ecc_symbols"])
        return self.to_cells(data)

    def decode(self, text: str) -> str:
        data = self.from_cells(text)
        if not data:
            return ""
        try:
            data, _ = ErrorCorrection.decode(data, self.config["ecc_symbols"])
        except ECCError as e:
            raise self.decode_error(str(e)) from None
        return self.utf8(data)
