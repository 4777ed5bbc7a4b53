"""
Classical substitution and transposition ciphers.

Character policy: the letter substitutions (Caesar, ROT13, Affine,
Vigenere, alphabetical substitution) pass every non-letter through
unchanged and preserve case. A1Z26 and Bacon drop characters they cannot
represent. Rail fence transposes every character.
"""

import string

from ..framework import Param, SymmetricModule, TransformModule, register_module

LOWER = string.ascii_lowercase
UPPER = string.ascii_uppercase


def shift_letter(c: str, shift: int) -> str:
    if c in LOWER:
        return LOWER[(LOWER.index(c) + shift) % 26]
    if c in UPPER:
        return UPPER[(UPPER.index(c) + shift) % 26]
    return c


def caesar(text: str, shift: int) -> str:
    return "".join(shift_letter(c, shift) for c in text)


def mod_inverse(a: int, m: int):
    """Multiplicative inverse of a modulo m, or None."""
    try:
        return pow(a, -1, m)
    except ValueError:
        return None


@register_module
class CaesarCipherModule(TransformModule):
    kind = "caesar"
    name = "Caesar Cipher"
    description = "Shift every letter a fixed number of places."
    PARAMS = (
        Param("shift", int, 1),
    )

    def encode(self, text: str) -> str:
        return caesar(text, self.config["shift"])

    def decode(self, text: str) -> str:
        return caesar(text, -self.config["shift"])


@register_module
class ROT13Module(SymmetricModule):
    kind = "rot13"
    name = "ROT13"
    description = "Caesar shift of 13; its own inverse."

    def transform(self, text: str) -> str:
        return caesar(text, 13)


@register_module
class A1Z26Module(TransformModule):
    """Letters to alphabet positions joined by '-', words by a space."""

    kind = "a1z26"
    name = "A1Z26"
    description = "Letters as their position in the alphabet (A=1 ... Z=26)."

    def encode(self, text: str) -> str:
        words = []
        for word in text.split():
            numbers = [str(LOWER.index(c) + 1) for c in word.lower() if c in LOWER]
            if numbers:
                words.append("-".join(numbers))
        return " ".join(words)

    def decode(self, text: str) -> str:
        words = []
        for word in text.split():
            letters = []
            for token in word.split("-"):
                if not (token.isascii() and token.isdigit()) or not 1 <= int(token) <= 26:
                    raise self.decode_error(f"'{token}' is not a number from 1 to 26")
                letters.append(LOWER[int(token) - 1])
            words.append("".join(letters))
        return " ".join(words)


@register_module
class AffineCipherModule(TransformModule):
    kind = "affine"
    name = "Affine Cipher"
    description = "E(x) = (a*x + b) mod 26; a must be coprime to 26."
    PARAMS = (
        Param("a", int, 5),
        Param("b", int, 8),
    )

    def validate(self):
        if mod_inverse(self.config["a"] % 26, 26) is None:
            raise self.config_error(f"'a' ({self.config['a']}) must be coprime to 26")

    def _map(self, text: str, fn) -> str:
        out = []
        for c in text:
            alphabet = LOWER if c in LOWER else UPPER if c in UPPER else None
            out.append(alphabet[fn(alphabet.index(c)) % 26] if alphabet else c)
        return "".join(out)

    def encode(self, text: str) -> str:
        a, b = self.config["a"], self.config["b"]
        return self._map(text, lambda x: a * x + b)

    def decode(self, text: str) -> str:
        a_inv = mod_inverse(self.config["a"] % 26, 26)
        b = self.config["b"]
        return self._map(text, lambda y: a_inv * (y - b))


@register_module
class VigenereCipherModule(TransformModule):
    """The key advances only on letters."""

    kind = "vigenere"
    name = "Vigenere Cipher"
    description = "Polyalphabetic Caesar shift driven by a repeating keyword."
    PARAMS = (
        Param("key", str, "KEY"),
    )

    def shifts(self):
        key = [UPPER.index(c) for c in self.config["key"].upper() if c in UPPER]
        if not key:
            raise self.config_error("Key must contain at least one letter")
        return key

    def validate(self):
        self.shifts()

    def _apply(self, text: str, sign: int) -> str:
        key = self.shifts()
        out = []
        i = 0
        for c in text:
            if c in string.ascii_letters:
                c = shift_letter(c, sign * key[i % len(key)])
                i += 1
            out.append(c)
        return "".join(out)

    def encode(self, text: str) -> str:
        return self._apply(text, 1)

    def decode(self, text: str) -> str:
        return self._apply(text, -1)


def rail_pattern(length: int, rails: int):
    """Rail index of every position along the zig-zag."""
    cycle = 2 * (rails - 1)
    return [min(i % cycle, cycle - i % cycle) for i in range(length)]


@register_module
class RailFenceCipherModule(TransformModule):
    kind = "rail_fence"
    name = "Rail Fence Cipher"
    description = "Zig-zag transposition over a number of rails."
    PARAMS = (
        Param("rails", int, 3),
    )

    def validate(self):
        if self.config["rails"] < 2:
            raise self.config_error("At least 2 rails are required")

    def encode(self, text: str) -> str:
        pattern = rail_pattern(len(text), self.config["rails"])
        order = sorted(range(len(text)), key=lambda i: (pattern[i], i))
        return "".join(text[i] for i in order)

    def decode(self, text: str) -> str:
        pattern = rail_pattern(len(text), self.config["rails"])
        order = sorted(range(len(text)), key=lambda i: (pattern[i], i))
        out = [""] * len(text)
        for c, i in zip(text, order):
            out[i] = c
        return "".join(out)


@register_module
class BaconCipherModule(TransformModule):
    """
    26-letter Bacon cipher: each letter is five a/b symbols (a=0, b=1).
    Non-letters are dropped; decoding yields lower case.
    """

    kind = "bacon"
    name = "Bacon Cipher"
    description = "Letters as five-symbol a/b groups."

    def encode(self, text: str) -> str:
        groups = []
        for c in text.lower():
            if c in LOWER:
                groups.append(format(LOWER.index(c), "05b").replace("0", "a").replace("1", "b"))
        return " ".join(groups)

    def decode(self, text: str) -> str:
        symbols = "".join(text.split()).lower()
        if symbols.strip("ab"):
            raise self.decode_error("Only 'a' and 'b' symbols are allowed")
        if len(symbols) % 5:
            raise self.decode_error("Symbol count is not a multiple of 5")
        out = []
        for i in range(0, len(symbols), 5):
            value = int(symbols[i:i + 5].replace("a", "0").replace("b", "1"), 2)
            if value >= 26:
                raise self.decode_error(f"Group '{symbols[i:i + 5]}' is not a letter")
            out.append(LOWER[value])
        return "".join(out)


@register_module
class AlphabeticalSubstitutionModule(TransformModule):
    """Maps plaintext alphabet to ciphertext alphabet position by position."""

    kind = "substitution"
    name = "Alphabetical Substitution"
    description = "Monoalphabetic substitution between two alphabets."
    PARAMS = (
        Param("plaintext", str, LOWER),
        Param("ciphertext", str, LOWER[::-1]),
    )

    def validate(self):
        plain, cipher = self.config["plaintext"], self.config["ciphertext"]
        if len(plain) != len(cipher):
            raise self.config_error("Plaintext and ciphertext alphabets must have the same length")
        if len(set(plain)) != len(plain) or len(set(cipher)) != len(cipher):
            raise self.config_error("Alphabets must not repeat characters")

    def _table(self, src: str, dst: str):
        table = {}
        for f, t in zip(src, dst):
            for variant, target in ((f.upper(), t.upper()), (f.lower(), t.lower())):
                if len(variant) == 1:
                    table.setdefault(variant, target)
        for f, t in zip(src, dst):
            table[f] = t
        return str.maketrans(table)

    def encode(self, text: str) -> str:
        return text.translate(self._table(self.config["plaintext"], self.config["ciphertext"]))

    def decode(self, text: str) -> str:
        return text.translate(self._table(self.config["ciphertext"], self.config["plaintext"]))
