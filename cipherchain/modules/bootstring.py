"""
Bootstring variable-length digit encoding and its Punycode parameterization.

A string is encoded as its basic code points (those below initial_n),
a delimiter, and a run of generalized variable-length integers, each of
which encodes the (code point, insertion position) delta of the next
non-basic character. The digit thresholds follow an adaptive bias that
both directions recompute identically after every encoded delta.
"""

from typing import List, NamedTuple

from ..framework import Param, TransformModule, register_module


class BootstringParams(NamedTuple):
    base: int = 36
    tmin: int = 1
    tmax: int = 26
    skew: int = 38
    damp: int = 700
    initial_bias: int = 72
    initial_n: int = 128
    delimiter: str = "-"
    digits: str = "abcdefghijklmnopqrstuvwxyz0123456789"


PUNYCODE = BootstringParams()
MAX_CODE_POINT = 0x10FFFF
SURROGATE_FIRST, SURROGATE_LAST = 0xD800, 0xDFFF
ACE_PREFIX = "xn--"


def check_params(p: BootstringParams):
    """Raise ValueError unless p satisfies the Bootstring constraints."""
    if p.base < 2:
        raise ValueError("base must be at least 2")
    if not 0 <= p.tmin <= p.tmax < p.base:
        raise ValueError("thresholds must satisfy 0 <= tmin <= tmax <= base - 1")
    if p.skew < 1:
        raise ValueError("skew must be at least 1")
    if p.damp < 2:
        raise ValueError("damp must be at least 2")
    if p.initial_bias % p.base > p.base - p.tmin:
        raise ValueError("initial_bias mod base must not exceed base - tmin")
    if not 1 <= p.initial_n <= MAX_CODE_POINT:
        raise ValueError("initial_n must be a valid code point")
    if len(p.delimiter) != 1 or ord(p.delimiter) >= p.initial_n:
        raise ValueError("delimiter must be a single basic code point")
    if len(p.digits) != p.base:
        raise ValueError(f"digit alphabet must have exactly {p.base} symbols")
    if len(set(p.digits)) != p.base:
        raise ValueError("digit alphabet contains duplicates")
    if p.delimiter in p.digits:
        raise ValueError("delimiter cannot be a digit symbol")
    if any(ord(d) >= p.initial_n for d in p.digits):
        raise ValueError("digit symbols must be basic code points")


def adapt(delta: int, numpoints: int, firsttime: bool, p: BootstringParams = PUNYCODE) -> int:
    """Bias recurrence shared by encoder and decoder."""
    delta = delta // p.damp if firsttime else delta // 2
    delta += delta // numpoints
    k = 0
    while delta > ((p.base - p.tmin) * p.tmax) // 2:
        delta //= p.base - p.tmin
        k += p.base
    return k + ((p.base - p.tmin + 1) * delta) // (delta + p.skew)


def _threshold(k: int, bias: int, p: BootstringParams) -> int:
    if k <= bias:
        return p.tmin
    if k >= bias + p.tmax:
        return p.tmax
    return k - bias


def bootstring_encode(text: str, p: BootstringParams = PUNYCODE) -> str:
    points = [ord(c) for c in text]
    output = [c for c in text if ord(c) < p.initial_n]
    h = b = len(output)
    if b:
        output.append(p.delimiter)

    n = p.initial_n
    delta = 0
    bias = p.initial_bias
    while h < len(points):
        m = min(c for c in points if c >= n)
        delta += (m - n) * (h + 1)
        n = m
        for c in points:
            if c < n:
                delta += 1
            elif c == n:
                q = delta
                k = p.base
                while True:
                    t = _threshold(k, bias, p)
                    if q < t:
                        break
                    output.append(p.digits[t + (q - t) % (p.base - t)])
                    q = (q - t) // (p.base - t)
                    k += p.base
                output.append(p.digits[q])
                bias = adapt(delta, h + 1, h == b, p)
                delta = 0
                h += 1
        delta += 1
        n += 1
    return "".join(output)


def _digit_values(p: BootstringParams):
    values = {d: i for i, d in enumerate(p.digits)}
    # letters decode case-insensitively unless the alphabet itself uses both cases
    for d, i in list(values.items()):
        for variant in (d.lower(), d.upper()):
            values.setdefault(variant, i)
    return values


def bootstring_decode(text: str, p: BootstringParams = PUNYCODE) -> str:
    """Raise ValueError on any malformed input."""
    b = max(text.rfind(p.delimiter), 0)
    output: List[str] = []
    for c in text[:b]:
        if ord(c) >= p.initial_n:
            raise ValueError(f"non-basic character {c!r} before the delimiter")
        output.append(c)

    values = _digit_values(p)
    n = p.initial_n
    i = 0
    bias = p.initial_bias
    pos = b + 1 if p.delimiter in text else 0
    while pos < len(text):
        oldi = i
        w = 1
        k = p.base
        while True:
            if pos >= len(text):
                raise ValueError("truncated variable-length integer")
            digit = values.get(text[pos])
            if digit is None:
                raise ValueError(f"invalid digit {text[pos]!r}")
            pos += 1
            i += digit * w
            t = _threshold(k, bias, p)
            if digit < t:
                break
            w *= p.base - t
            k += p.base
        bias = adapt(i - oldi, len(output) + 1, oldi == 0, p)
        n += i // (len(output) + 1)
        i %= len(output) + 1
        if n > MAX_CODE_POINT:
            raise ValueError(f"decoded code point {n:#x} is out of range")
        if SURROGATE_FIRST <= n <= SURROGATE_LAST:
            raise ValueError(f"decoded code point {n:#x} is a surrogate")
        output.insert(i, chr(n))
        i += 1
    return "".join(output)


# ==========================================
#  MODULES
# ==========================================


@register_module
class BootstringModule(TransformModule):
    """Bootstring with every parameter exposed."""

    kind = "bootstring"
    name = "Bootstring"
    description = "Generalized variable-length digit encoding of code points (configurable parameters)."
    PARAMS = (
        Param("base", int, PUNYCODE.base),
        Param("tmin", int, PUNYCODE.tmin),
        Param("tmax", int, PUNYCODE.tmax),
        Param("skew", int, PUNYCODE.skew),
        Param("damp", int, PUNYCODE.damp),
        Param("initial_bias", int, PUNYCODE.initial_bias),
        Param("initial_n", int, PUNYCODE.initial_n, help="First non-basic code point"),
        Param("delimiter", str, PUNYCODE.delimiter),
        Param("digits", str, PUNYCODE.digits, help="Digit alphabet, one symbol per digit value"),
    )

    def params(self) -> BootstringParams:
        p = BootstringParams(**self.config)
        try:
            check_params(p)
        except ValueError as e:
            raise self.config_error(str(e)) from None
        return p

    def validate(self):
        self.params()

    def encode(self, text: str) -> str:
        return bootstring_encode(text, self.params())

    def decode(self, text: str) -> str:
        try:
            return bootstring_decode(text, self.params())
        except ValueError as e:
            raise self.decode_error(str(e)) from None


@register_module
class PunycodeModule(TransformModule):
    """
    Punycode (RFC 3492). In domain mode each dot-separated label is handled
    separately: labels with non-ASCII characters become 'xn--' + punycode of
    the lower-cased label, and 'xn--' labels are decoded back.
    """

    kind = "punycode"
    name = "Punycode"
    description = "RFC 3492 Punycode, optionally per domain label with the xn-- prefix."
    PARAMS = (
        Param("domain", bool, False, help="Treat input as a domain name"),
    )

    def encode(self, text: str) -> str:
        if not self.config["domain"]:
            return bootstring_encode(text)
        labels = []
        for label in text.split("."):
            if all(ord(c) < 0x80 for c in label):
                labels.append(label)
            else:
                labels.append(ACE_PREFIX + bootstring_encode(label.lower()))
        return ".".join(labels)

    def decode(self, text: str) -> str:
        try:
            if not self.config["domain"]:
                return bootstring_decode(text)
            labels = []
            for label in text.split("."):
                if label.lower().startswith(ACE_PREFIX):
                    labels.append(bootstring_decode(label[len(ACE_PREFIX):]))
                else:
                    labels.append(label)
            return ".".join(labels)
        except ValueError as e:
            raise self.decode_error(str(e)) from None
