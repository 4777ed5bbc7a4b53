# file: tests/test_bootstring.py

"""
Unit tests for Bootstring and Punycode.

Test coverage:
    - RFC 3492 sample strings
    - Agreement with the interpreter's punycode codec
    - Domain mode
    - Parameter validation and malformed input
"""

import pytest

from cipherchain import ConfigError, DecodeError, create
from cipherchain.modules.bootstring import PUNYCODE, BootstringParams, bootstring_decode, bootstring_encode


RFC_SAMPLES = [
    ("他们为什么不说中文", "ihqwcrb4cv8a8dqg056pqjye"),
    ("3年B組金八先生", "3B-ww4c5e180e575a65lsy2b"),
    ("bücher", "bcher-kva"),
    ("München", "Mnchen-3ya"),
]


class TestPunycode:

    @pytest.mark.parametrize("text, encoded", RFC_SAMPLES)
    def test_encode_samples(self, text, encoded):
        assert create("punycode").process(text) == encoded

    @pytest.mark.parametrize("text, encoded", RFC_SAMPLES)
    def test_decode_samples(self, text, encoded):
        assert create("punycode").set_direction("decode").process(encoded) == text

    @pytest.mark.parametrize("text", ["café", "été à Paris", "привет", "\U0001f600 smile"])
    def test_matches_builtin_codec(self, text):
        assert bootstring_encode(text) == text.encode("punycode").decode("ascii")

    def test_ascii_only_gets_delimiter(self):
        assert bootstring_encode("abc") == "abc-"
        assert bootstring_decode("abc-") == "abc"

    def test_empty(self):
        assert bootstring_encode("") == ""
        assert bootstring_decode("") == ""

    def test_digits_are_case_insensitive(self):
        assert bootstring_decode("bcher-KVA") == "bücher"

    def test_domain_mode(self):
        module = create("punycode", domain=True)
        assert module.process("www.München.de") == "www.xn--mnchen-3ya.de"
        module.set_direction("decode")
        assert module.process("www.xn--mnchen-3ya.de") == "www.münchen.de"

    @pytest.mark.parametrize("text", ["abc-!", "abc-9", "ü-abc"])
    def test_malformed_input(self, text):
        with pytest.raises(DecodeError):
            create("punycode").set_direction("decode").process(text)

    def test_surrogate_code_point_rejected(self):
        encoded = bootstring_encode("a\ud800")
        with pytest.raises(ValueError, match="surrogate"):
            bootstring_decode(encoded)
        with pytest.raises(DecodeError, match="surrogate"):
            create("punycode").set_direction("decode").process(encoded)


class TestBootstring:

    def test_defaults_are_punycode(self):
        module = create("bootstring")
        assert module.params() == PUNYCODE
        assert module.process("bücher") == "bcher-kva"

    def test_custom_parameterization_round_trip(self):
        params = dict(base=10, tmin=1, tmax=9, skew=38, damp=700, initial_bias=72,
                      initial_n=128, delimiter="-", digits="0123456789")
        text = "héllo wörld ☃"
        encoded = create("bootstring", **params).process(text)
        assert set(encoded.rpartition("-")[2]) <= set("0123456789")
        assert create("bootstring", **params).set_direction("decode").process(encoded) == text

    def test_custom_digits_round_trip(self):
        digits = "ZYXWVUTSRQPONMLKJIHGFEDCBA9876543210"
        encoded = bootstring_encode("naïve", BootstringParams(digits=digits))
        assert bootstring_decode(encoded, BootstringParams(digits=digits)) == "naïve"

    @pytest.mark.parametrize("params, match", [
        ({"base": 1}, "base"),
        ({"tmin": 30, "tmax": 20}, "thresholds"),
        ({"skew": 0}, "skew"),
        ({"damp": 1}, "damp"),
        ({"digits": "abc"}, "exactly 36"),
        ({"digits": "a" * 36}, "duplicates"),
        ({"delimiter": "a"}, "delimiter"),
        ({"delimiter": "--"}, "delimiter"),
        ({"initial_n": 0}, "initial_n"),
    ])
    def test_invalid_parameters(self, params, match):
        with pytest.raises(ConfigError, match=match):
            create("bootstring", **params).process("x")
