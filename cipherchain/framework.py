"""
Module framework: the abstract transform contract, typed parameters and
the registration decorator.

Every transform in the suite is a TransformModule subclass decorated with
@register_module. An instance carries its own config, enabled flag and
direction; process() is a pure function of (text, config, direction).
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Type

from .errors import ConfigError, DecodeError

# ==========================================
#  DIRECTION & PARAMETERS
# ==========================================


class Direction(Enum):
    ENCODE = "encode"
    DECODE = "decode"

    def flipped(self) -> "Direction":
        return Direction.DECODE if self is Direction.ENCODE else Direction.ENCODE

    @classmethod
    def parse(cls, value) -> "Direction":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ConfigError(f"Unknown direction '{value}' (expected 'encode' or 'decode')") from None


_TRUE_WORDS = ("true", "yes", "on", "1")
_FALSE_WORDS = ("false", "no", "off", "0")


class Param:
    """
    Declaration of one named, typed module parameter.

    type is str, int or bool. A str parameter with `choices` is an
    enumerated choice; values are matched case-insensitively and stored
    in their declared spelling.
    """

    def __init__(self, name: str, type: type, default: Any,
                 choices: Optional[Tuple[str, ...]] = None, help: str = ""):
        if type not in (str, int, bool):
            raise TypeError(f"Unsupported parameter type: {type!r}")
        self.name = name
        self.type = type
        self.choices = tuple(choices) if choices else None
        self.help = help
        self.default = default

    @property
    def type_name(self) -> str:
        if self.choices:
            return "|".join(self.choices)
        return self.type.__name__

    def coerce(self, value: Any, module: str = None) -> Any:
        """Convert a primitive (or its string spelling) to this parameter's type."""
        if self.type is bool:
            if isinstance(value, bool):
                return value
            if isinstance(value, str) and value.strip().lower() in _TRUE_WORDS + _FALSE_WORDS:
                return value.strip().lower() in _TRUE_WORDS
            raise ConfigError(f"'{self.name}' expects a boolean, got {value!r}", module)

        if self.type is int:
            if isinstance(value, bool):
                raise ConfigError(f"'{self.name}' expects an integer, got {value!r}", module)
            if isinstance(value, int):
                return value
            if isinstance(value, str):
                try:
                    return int(value.strip())
                except ValueError:
                    pass
            raise ConfigError(f"'{self.name}' expects an integer, got {value!r}", module)

        if not isinstance(value, str):
            raise ConfigError(f"'{self.name}' expects text, got {value!r}", module)
        if self.choices:
            for choice in self.choices:
                if choice.lower() == value.strip().lower():
                    return choice
            raise ConfigError(
                f"'{self.name}' must be one of {', '.join(self.choices)}; got '{value}'", module)
        return value

    def __repr__(self):
        return f"Param({self.name!r}, {self.type_name}, default={self.default!r})"


# ==========================================
#  FRAMEWORK: Abstract Base Class & Registry
# ==========================================


class TransformModule(ABC):
    """Abstract base class that all pipeline modules must implement."""

    kind: str = ""
    name: str = ""
    description: str = ""
    PARAMS: Tuple[Param, ...] = ()
    HAS_DIRECTION = True

    def __init__(self, **params):
        self.config: Dict[str, Any] = {p.name: p.default for p in self.PARAMS}
        self.enabled = True
        self.direction: Optional[Direction] = Direction.ENCODE if self.HAS_DIRECTION else None
        if params:
            self.configure(**params)

    # --- configuration ---

    @classmethod
    def param(cls, name: str) -> Param:
        for p in cls.PARAMS:
            if p.name == name:
                return p
        raise ConfigError(f"Unknown parameter '{name}'", cls.name)

    def configure(self, **params) -> "TransformModule":
        """Coerce and store parameter values; returns self for chaining."""
        coerced = {}
        for key, value in params.items():
            coerced[key] = self.param(key).coerce(value, self.name)
        self.config.update(coerced)
        return self

    def set_direction(self, direction) -> "TransformModule":
        if not self.HAS_DIRECTION:
            raise ConfigError("Module has no encode/decode direction", self.name)
        self.direction = Direction.parse(direction)
        return self

    @property
    def decoding(self) -> bool:
        return self.direction is Direction.DECODE

    def validate(self):
        """Check cross-parameter consistency; raise ConfigError on failure."""
        pass

    def config_error(self, message: str) -> ConfigError:
        return ConfigError(message, self.name)

    def decode_error(self, message: str) -> DecodeError:
        return DecodeError(message, self.name)

    def utf8_bytes(self, text: str) -> bytes:
        """UTF-8 bytes of text; lone surrogates fail the stage."""
        try:
            return text.encode("utf-8")
        except UnicodeEncodeError as e:
            raise self.decode_error(f"Input is not encodable as UTF-8 ({e.reason} at position {e.start})") from None

    # --- processing ---

    def process(self, text: str) -> str:
        self.validate()
        if self.decoding:
            return self.decode(text)
        return self.encode(text)

    @abstractmethod
    def encode(self, text: str) -> str:
        pass

    @abstractmethod
    def decode(self, text: str) -> str:
        pass

    # --- persistence ---

    def to_record(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "config": dict(self.config),
            "enabled": self.enabled,
            "direction": self.direction.value if self.direction else None,
        }

    def apply_record(self, record: Dict[str, Any]) -> "TransformModule":
        self.configure(**record.get("config", {}))
        self.enabled = bool(record.get("enabled", True))
        direction = record.get("direction")
        if self.HAS_DIRECTION and direction is not None:
            self.set_direction(direction)
        return self

    def copy(self) -> "TransformModule":
        return type(self)().apply_record(self.to_record())

    def __repr__(self):
        state = "" if self.enabled else ", disabled"
        direction = f", {self.direction.value}" if self.direction else ""
        return f"<{type(self).__name__} {self.config}{direction}{state}>"


class SymmetricModule(TransformModule):
    """A module with a single operation and no encode/decode switch."""

    HAS_DIRECTION = False

    @abstractmethod
    def transform(self, text: str) -> str:
        pass

    def encode(self, text: str) -> str:
        return self.transform(text)

    def decode(self, text: str) -> str:
        return self.transform(text)


MODULE_REGISTRY: Dict[str, Type[TransformModule]] = {}


def register_module(cls):
    """Decorator to register a module class under its kind."""
    if not cls.kind:
        raise TypeError(f"{cls.__name__} has no kind")
    if cls.kind in MODULE_REGISTRY:
        raise TypeError(f"Duplicate module kind '{cls.kind}'")
    MODULE_REGISTRY[cls.kind] = cls
    return cls
