# file: tests/test_enigma.py

"""
Unit tests for the Enigma rotor machine.

Test coverage:
    - Reference ciphertexts
    - Stepping including the middle-rotor double step
    - Self-reciprocity and character handling
    - Configuration validation
"""

import pytest

from cipherchain import ConfigError, DecodeError, create
from cipherchain.modules.enigma import ROTORS, Rotor, RotorMachine, parse_plugboard, parse_reflector


def machine_at(positions, names=("I", "II", "III")):
    rotors = [Rotor(*ROTORS[name], position=ord(p) - ord("A")) for name, p in zip(names, positions)]
    return RotorMachine(rotors, list(range(26)))


class TestReferenceVectors:

    def test_default_settings(self):
        assert create("enigma").process("AAAAA") == "BDZGO"

    def test_ring_settings(self):
        assert create("enigma", rings="BBB").process("AAAAA") == "EWTYX"

    def test_thin_reflector_with_beta_matches_reflector_b(self):
        """Beta at A with B-thin is equivalent to the three-rotor reflector B."""
        m4 = create("enigma", rotors="BETA I II III", positions="AAAA", rings="AAAA", reflector="B-thin")
        assert m4.process("AAAAA") == "BDZGO"


class TestStepping:

    def test_double_step(self):
        machine = machine_at("ADU")
        seen = []
        for _ in range(3):
            machine.step()
            seen.append(machine.positions)
        assert seen == ["ADV", "AEW", "BFX"]

    def test_single_step(self):
        machine = machine_at("AAA")
        machine.step()
        assert machine.positions == "AAB"

    def test_leftmost_of_four_never_steps(self):
        machine = machine_at("AADU", names=("BETA", "I", "II", "III"))
        for _ in range(3):
            machine.step()
        assert machine.positions == "ABFX"


class TestTransform:

    def test_self_reciprocal(self):
        enigma = create("enigma", rotors="IV II V", positions="QEV", rings="CKR", plugboard="AB CD EF")
        text = "Weather report: clear skies"
        assert enigma.process(enigma.process(text)) == text

    def test_same_text_twice_gives_same_output(self):
        enigma = create("enigma")
        assert enigma.process("HELLO") == enigma.process("HELLO")

    def test_no_letter_encrypts_to_itself(self):
        out = create("enigma", positions="XYZ").process("A" * 200)
        assert "A" not in out

    def test_case_preserved_and_punctuation_passed(self):
        out = create("enigma").process("Hello, World!")
        assert out[0].isupper() and out[1:5].islower()
        assert out[5:7] == ", "
        assert out[-1] == "!"

    def test_punctuation_does_not_step_rotors(self):
        enigma = create("enigma")
        assert enigma.process("AA AAA").replace(" ", "") == enigma.process("AAAAA")

    def test_reject_non_alpha(self):
        with pytest.raises(DecodeError, match="not a letter"):
            create("enigma", non_alpha="reject").process("AB1")

    def test_plugboard_swaps_output_letters(self):
        # A is unplugged, so only the exit letters B and D trade places
        assert create("enigma", plugboard="BD").process("AAAAA") == "DBZGO"

    def test_custom_reflector(self):
        wiring = "YRUHQSLDPXNGOKMIEBFZCWVJAT"
        custom = create("enigma", reflector="custom", reflector_wiring=wiring)
        assert custom.process("AAAAA") == "BDZGO"


class TestConfiguration:

    @pytest.mark.parametrize("params, match", [
        ({"rotors": "I I III"}, "only be used once"),
        ({"rotors": "I II IX"}, "Unknown rotor"),
        ({"rotors": "I"}, "rotors are required"),
        ({"positions": "AA"}, "Positions"),
        ({"rings": "A1A"}, "Ring settings"),
        ({"plugboard": "AB AC"}, "more than one pair"),
        ({"plugboard": "AA"}, "itself"),
        ({"plugboard": "ABC"}, "two letters"),
        ({"reflector": "custom", "reflector_wiring": "ABC"}, "exactly once"),
    ])
    def test_invalid_settings(self, params, match):
        with pytest.raises(ConfigError, match=match):
            create("enigma", **params).process("HELLO")

    def test_empty_positions_default_to_a(self):
        assert create("enigma", positions="", rings="").process("AAAAA") == "BDZGO"

    def test_unknown_reflector_choice(self):
        with pytest.raises(ConfigError):
            create("enigma", reflector="Z")

    def test_parse_plugboard(self):
        mapping = parse_plugboard("ab")
        assert mapping[0] == 1 and mapping[1] == 0 and mapping[2] == 2

    def test_parse_reflector_requires_involution(self):
        with pytest.raises(ValueError, match="itself"):
            parse_reflector("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
        with pytest.raises(ValueError, match="symmetric"):
            parse_reflector("BCDEFGHIJKLMNOPQRSTUVWXYZA")
