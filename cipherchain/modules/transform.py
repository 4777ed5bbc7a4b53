"""
Plain text transforms with no encode/decode direction.
"""

from ..framework import Param, SymmetricModule, register_module


@register_module
class ReverseModule(SymmetricModule):
    kind = "reverse"
    name = "Reverse"
    description = "Reverse the order of characters."

    def transform(self, text: str) -> str:
        return text[::-1]


@register_module
class CaseTransformModule(SymmetricModule):
    kind = "case_transform"
    name = "Case Transform"
    description = "Lower, upper, capitalized or alternating case."
    PARAMS = (
        Param("mode", str, "lower", choices=("lower", "upper", "capitalize", "alternating")),
    )

    def transform(self, text: str) -> str:
        mode = self.config["mode"]
        if mode == "lower":
            return text.lower()
        if mode == "upper":
            return text.upper()
        if mode == "capitalize":
            return " ".join(word[:1].upper() + word[1:] for word in text.split(" "))
        return "".join(c.lower() if i % 2 == 0 else c.upper() for i, c in enumerate(text))


@register_module
class ReplaceModule(SymmetricModule):
    kind = "replace"
    name = "Replace"
    description = "Replace every occurrence of a substring."
    PARAMS = (
        Param("find", str, ""),
        Param("replace", str, ""),
    )

    def transform(self, text: str) -> str:
        if not self.config["find"]:
            return text
        return text.replace(self.config["find"], self.config["replace"])


NUMERAL_BASES = {"decimal": 10, "binary": 2, "octal": 8, "hex": 16}
NUMERAL_FORMATS = {"decimal": "d", "binary": "b", "octal": "o", "hex": "x"}


@register_module
class NumeralSystemModule(SymmetricModule):
    """Whitespace separated numbers; tokens that do not parse are kept."""

    kind = "numeral"
    name = "Numeral System"
    description = "Convert numbers between decimal, binary, octal and hexadecimal."
    PARAMS = (
        Param("source", str, "decimal", choices=tuple(NUMERAL_BASES)),
        Param("target", str, "binary", choices=tuple(NUMERAL_BASES)),
    )

    def transform(self, text: str) -> str:
        radix = NUMERAL_BASES[self.config["source"]]
        fmt = NUMERAL_FORMATS[self.config["target"]]
        out = []
        for token in text.split():
            try:
                out.append(format(int(token, radix), fmt))
            except ValueError:
                out.append(token)
        return " ".join(out)


BITWISE_OPS = {
    "not": lambda b, k: ~b,
    "and": lambda b, k: b & k,
    "or": lambda b, k: b | k,
    "xor": lambda b, k: b ^ k,
    "nand": lambda b, k: ~(b & k),
    "nor": lambda b, k: ~(b | k),
    "xnor": lambda b, k: ~(b ^ k),
}


@register_module
class BitwiseOperationModule(SymmetricModule):
    """
    Applies the operation to every UTF-8 byte. Text output replaces byte
    sequences that are not valid UTF-8; hex output is lossless.
    """

    kind = "bitwise"
    name = "Bitwise Operation"
    description = "Per-byte NOT/AND/OR/XOR/NAND/NOR/XNOR with an 8-bit operand."
    PARAMS = (
        Param("op", str, "xor", choices=tuple(BITWISE_OPS)),
        Param("operand", int, 0, help="0-255"),
        Param("output_format", str, "text", choices=("text", "hex")),
    )

    def validate(self):
        if not 0 <= self.config["operand"] <= 0xFF:
            raise self.config_error("Operand must be between 0 and 255")

    def transform(self, text: str) -> str:
        op = BITWISE_OPS[self.config["op"]]
        operand = self.config["operand"]
        data = bytes(op(b, operand) & 0xFF for b in self.utf8_bytes(text))
        if self.config["output_format"] == "hex":
            return data.hex()
        return data.decode("utf-8", errors="replace")
