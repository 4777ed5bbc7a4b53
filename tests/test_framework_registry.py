# file: tests/test_framework_registry.py

"""
Unit tests for the module framework and registry.

Test coverage:
    - Kind registration and lookup
    - Parameter coercion and validation
    - Direction handling
    - Record round-trips
"""

import pytest

from cipherchain import (ConfigError, Direction, SymmetricModule, UnknownModuleError,
                         available_modules, create, module_from_record, register_module)
from cipherchain.framework import MODULE_REGISTRY


EXPECTED_KINDS = [
    "reverse", "case_transform", "replace", "numeral", "bitwise",
    "morse", "spelling",
    "caesar", "rot13", "a1z26", "affine", "vigenere", "rail_fence", "bacon", "substitution",
    "polybius", "adfgx", "bifid", "trifid", "nihilist", "tap_code",
    "enigma",
    "base64", "base32", "ascii85", "baudot", "unicode", "url", "integer", "braille",
    "bootstring", "punycode",
    "block_cipher", "rc4", "hash", "hmac",
]


class TestRegistry:
    """Test kind lookup and instance creation."""

    def test_all_kinds_registered(self):
        """Every built-in kind is available, in registration order."""
        assert available_modules() == EXPECTED_KINDS

    def test_create_returns_fresh_default_instance(self):
        first = create("caesar")
        second = create("caesar")
        assert first is not second
        assert first.config == {"shift": 1}
        assert first.enabled is True
        assert first.direction is Direction.ENCODE

    def test_create_with_params(self):
        assert create("caesar", shift=7).config["shift"] == 7

    def test_unknown_kind(self):
        with pytest.raises(UnknownModuleError, match="nope"):
            create("nope")

    def test_unknown_kind_is_key_error(self):
        with pytest.raises(KeyError):
            create("nope")

    def test_every_kind_has_metadata(self):
        for kind, cls in MODULE_REGISTRY.items():
            assert cls.kind == kind
            assert cls.name
            assert cls.description

    def test_duplicate_registration_rejected(self):
        with pytest.raises(TypeError, match="Duplicate"):
            @register_module
            class Impostor(SymmetricModule):
                kind = "caesar"

                def transform(self, text):
                    return text

        assert MODULE_REGISTRY["caesar"].__name__ == "CaesarCipherModule"

    def test_missing_kind_rejected(self):
        with pytest.raises(TypeError, match="no kind"):
            @register_module
            class Nameless(SymmetricModule):
                def transform(self, text):
                    return text


class TestParameters:
    """Test immediate coercion performed by configure()."""

    def test_int_from_string(self):
        assert create("caesar").configure(shift="5").config["shift"] == 5

    def test_bool_from_string(self):
        assert create("base64", url_safe="yes").config["url_safe"] is True
        assert create("base64", url_safe="off").config["url_safe"] is False

    def test_choice_is_case_insensitive_and_canonical(self):
        assert create("case_transform", mode="UPPER").config["mode"] == "upper"

    def test_choice_outside_set(self):
        with pytest.raises(ConfigError, match="must be one of"):
            create("case_transform", mode="sideways")

    def test_unknown_parameter(self):
        with pytest.raises(ConfigError, match="Unknown parameter"):
            create("caesar", rotation=3)

    def test_wrong_type_names_module(self):
        with pytest.raises(ConfigError) as excinfo:
            create("caesar", shift="three")
        assert excinfo.value.module == "Caesar Cipher"
        assert str(excinfo.value).startswith("Caesar Cipher: ")

    def test_bool_is_not_an_int(self):
        with pytest.raises(ConfigError):
            create("caesar", shift=True)

    def test_configure_chains(self):
        module = create("vigenere")
        assert module.configure(key="LEMON") is module

    def test_process_does_not_mutate_config(self):
        module = create("enigma")
        before = dict(module.config)
        module.process("HELLO")
        assert module.config == before

    def test_semantic_validation_is_deferred(self):
        """Cross-parameter checks run in process(), not configure()."""
        module = create("affine", a=2)
        with pytest.raises(ConfigError, match="coprime"):
            module.process("abc")


class TestDirection:

    def test_parse(self):
        assert Direction.parse("DECODE") is Direction.DECODE
        assert Direction.parse(Direction.ENCODE) is Direction.ENCODE

    def test_parse_invalid(self):
        with pytest.raises(ConfigError, match="Unknown direction"):
            Direction.parse("sideways")

    def test_flipped(self):
        assert Direction.ENCODE.flipped() is Direction.DECODE
        assert Direction.DECODE.flipped() is Direction.ENCODE

    def test_symmetric_module_has_no_direction(self):
        module = create("reverse")
        assert module.direction is None
        with pytest.raises(ConfigError, match="no encode/decode direction"):
            module.set_direction("decode")

    def test_decode_direction(self):
        module = create("caesar", shift=3).set_direction("decode")
        assert module.process("def") == "abc"


class TestRecords:

    def test_record_round_trip(self):
        module = create("enigma", rotors="IV V I", positions="QEV", plugboard="AB CD")
        module.enabled = False
        record = module.to_record()
        rebuilt = module_from_record(record)
        assert type(rebuilt) is type(module)
        assert rebuilt.to_record() == record

    def test_record_carries_direction(self):
        module = create("caesar", shift=4).set_direction("decode")
        record = module.to_record()
        assert record == {"kind": "caesar", "config": {"shift": 4}, "enabled": True, "direction": "decode"}
        assert module_from_record(record).direction is Direction.DECODE

    def test_copy_is_independent(self):
        module = create("caesar", shift=2)
        clone = module.copy()
        clone.configure(shift=9)
        assert module.config["shift"] == 2

    def test_malformed_record(self):
        with pytest.raises(ConfigError, match="Malformed"):
            module_from_record({"config": {}})

    def test_record_with_unknown_kind(self):
        with pytest.raises(UnknownModuleError):
            module_from_record({"kind": "teleporter"})
