"""
Enigma rotor machine.

Signal path per key press: plugboard, rotor stack right to left, reflector,
rotor stack left to right, plugboard. Stepping happens before the signal
passes through and reproduces the double-step of the middle rotor. Only
the three rightmost rotors are driven by pawls; a fourth (Greek) rotor on
the left stays where it was set.

The machine is rebuilt from its configured start positions on every
process() call, so processing the same text twice gives the same result
and processing the output again returns the original.
"""

import string
from typing import Dict, List, Sequence, Tuple

from ..framework import Param, SymmetricModule, register_module

# name -> (wiring, turnover notches)
ROTORS: Dict[str, Tuple[str, str]] = {
    "I": ("EKMFLGDQVZNTOWYHXUSPAIBRCJ", "Q"),
    "II": ("AJDKSIRUXBLHWTMCQGZNPYFVOE", "E"),
    "III": ("BDFHJLCPRTXVZNYEIWGAKMUSQO", "V"),
    "IV": ("ESOVPZJAYQUIRHXLNFTGKDCMWB", "J"),
    "V": ("VZBRGITYUPSDNHLXAWMJQOFECK", "Z"),
    "VI": ("JPGVOUMFYQBENHZRDKASXLICTW", "ZM"),
    "VII": ("NZJHGRCXMYSWBOUFAIVLPEKQDT", "ZM"),
    "VIII": ("FKQHTLXOCBJSPDZRAMEWNIUYGV", "ZM"),
    "BETA": ("LEYJVCNIXWPBQMDRTAKZGFUHOS", ""),
    "GAMMA": ("FSOKANUERHMBTIYCWLQPZXVGJD", ""),
}

REFLECTORS: Dict[str, str] = {
    "A": "EJMZALYXVBWFCRQUOHNKIGDTSP",
    "B": "YRUHQSLDPXNGOKMIEBFZCWVJAT",
    "C": "FVPJIAOYEDRZXWGCTKUQSBNMHL",
    "B-thin": "ENKQAUYWJICOPBLMDXZVFTHRGS",
    "C-thin": "RDOBJNTKVEHMLFCWZAXGYIPSUQ",
}

MIN_ROTORS = 2
MAX_ROTORS = 5
PAWLS = 3
LETTERS = string.ascii_uppercase


def _index(c: str) -> int:
    return ord(c) - ord("A")


class Rotor:
    """Wiring and notches are fixed; position is the mutable offset."""

    def __init__(self, wiring: str, notches: str = "", position: int = 0, ring: int = 0):
        self.wiring = [_index(c) for c in wiring]
        self.inverse = [0] * 26
        for i, w in enumerate(self.wiring):
            self.inverse[w] = i
        self.notches = {_index(c) for c in notches}
        self.position = position % 26
        self.ring = ring % 26

    def at_notch(self) -> bool:
        return self.position in self.notches

    def step(self):
        self.position = (self.position + 1) % 26

    def forward(self, c: int) -> int:
        shift = self.position - self.ring
        return (self.wiring[(c + shift) % 26] - shift) % 26

    def backward(self, c: int) -> int:
        shift = self.position - self.ring
        return (self.inverse[(c + shift) % 26] - shift) % 26


class RotorMachine:
    """
    Rotors are ordered left to right. reflector and plugboard are
    involutions over 0..25.
    """

    def __init__(self, rotors: Sequence[Rotor], reflector: Sequence[int], plugboard: Sequence[int] = None):
        self.rotors = list(rotors)
        self.reflector = list(reflector)
        self.plugboard = list(plugboard) if plugboard else list(range(26))

    @property
    def positions(self) -> str:
        return "".join(LETTERS[r.position] for r in self.rotors)

    def step(self):
        n = len(self.rotors)
        moving = {n - 1}
        for i in range(max(0, n - PAWLS), n - 1):
            # pawl i rides on rotor i+1; at its notch it pushes both rotors
            if self.rotors[i + 1].at_notch():
                moving.update((i, i + 1))
        for i in moving:
            self.rotors[i].step()

    def press(self, c: int) -> int:
        self.step()
        c = self.plugboard[c]
        for rotor in reversed(self.rotors):
            c = rotor.forward(c)
        c = self.reflector[c]
        for rotor in self.rotors:
            c = rotor.backward(c)
        return self.plugboard[c]


def parse_plugboard(pairs: str) -> List[int]:
    """'AB CD' -> involution over 0..25; raises ValueError on bad pairs."""
    mapping = list(range(26))
    used = set()
    for pair in pairs.upper().split():
        if len(pair) != 2 or any(c not in LETTERS for c in pair):
            raise ValueError(f"Plugboard pair '{pair}' must be two letters")
        a, b = pair
        if a == b:
            raise ValueError(f"Plugboard pair '{pair}' connects a letter to itself")
        for c in pair:
            if c in used:
                raise ValueError(f"Plugboard letter '{c}' is used in more than one pair")
            used.add(c)
        mapping[_index(a)], mapping[_index(b)] = _index(b), _index(a)
    return mapping


def parse_reflector(wiring: str) -> List[int]:
    """Reflector wiring must be a fixed-point-free involution of A-Z."""
    wiring = "".join(wiring.upper().split())
    if len(wiring) != 26 or set(wiring) != set(LETTERS):
        raise ValueError("Reflector wiring must contain each letter A-Z exactly once")
    mapping = [_index(c) for c in wiring]
    for i, j in enumerate(mapping):
        if i == j:
            raise ValueError(f"Reflector maps '{LETTERS[i]}' to itself")
        if mapping[j] != i:
            raise ValueError(f"Reflector is not symmetric at '{LETTERS[i]}'/'{LETTERS[j]}'")
    return mapping


def _letter_settings(value: str, count: int, label: str) -> List[int]:
    value = "".join(value.upper().split())
    if not value:
        return [0] * count
    if len(value) != count or any(c not in LETTERS for c in value):
        raise ValueError(f"{label} must be {count} letters (one per rotor), got '{value}'")
    return [_index(c) for c in value]


@register_module
class EnigmaModule(SymmetricModule):
    """
    Self-reciprocal: the same configuration both enciphers and deciphers.

    Letter case is preserved. Characters outside A-Z are copied unchanged
    without moving the rotors when non_alpha is 'pass', or fail the stage
    when it is 'reject'.
    """

    kind = "enigma"
    name = "Enigma Machine"
    description = "Rotor machine with double stepping, ring settings, reflector and plugboard."
    PARAMS = (
        Param("rotors", str, "I II III", help="Rotor names left to right (I-VIII, Beta, Gamma)"),
        Param("positions", str, "AAA", help="Start positions, one letter per rotor"),
        Param("rings", str, "AAA", help="Ring settings, one letter per rotor"),
        Param("reflector", str, "B", choices=tuple(REFLECTORS) + ("custom",)),
        Param("reflector_wiring", str, "", help="26-letter wiring when reflector is 'custom'"),
        Param("plugboard", str, "", help="Space separated letter pairs, e.g. 'AB CD'"),
        Param("non_alpha", str, "pass", choices=("pass", "reject")),
    )

    def machine(self) -> RotorMachine:
        names = self.config["rotors"].upper().split()
        if not MIN_ROTORS <= len(names) <= MAX_ROTORS:
            raise self.config_error(f"Between {MIN_ROTORS} and {MAX_ROTORS} rotors are required, got {len(names)}")
        if len(set(names)) != len(names):
            raise self.config_error("A rotor can only be used once")
        for name in names:
            if name not in ROTORS:
                raise self.config_error(f"Unknown rotor '{name}'")
        try:
            positions = _letter_settings(self.config["positions"], len(names), "Positions")
            rings = _letter_settings(self.config["rings"], len(names), "Ring settings")
            if self.config["reflector"] == "custom":
                reflector = parse_reflector(self.config["reflector_wiring"])
            else:
                reflector = [_index(c) for c in REFLECTORS[self.config["reflector"]]]
            plugboard = parse_plugboard(self.config["plugboard"])
        except ValueError as e:
            raise self.config_error(str(e)) from None

        rotors = [Rotor(*ROTORS[name], position=p, ring=r) for name, p, r in zip(names, positions, rings)]
        return RotorMachine(rotors, reflector, plugboard)

    def validate(self):
        self.machine()

    def transform(self, text: str) -> str:
        machine = self.machine()
        reject = self.config["non_alpha"] == "reject"
        out = []
        for ch in text:
            upper = ch.upper()
            if ch in string.ascii_letters:
                c = LETTERS[machine.press(_index(upper))]
                out.append(c if ch.isupper() else c.lower())
            elif reject:
                raise self.decode_error(f"Character {ch!r} is not a letter A-Z")
            else:
                out.append(ch)
        return "".join(out)
