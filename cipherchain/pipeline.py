"""
Pipeline engine.

An ordered list of modules fed one after another. Every mutation runs a
synchronous, total recompute: stage results are rebuilt from scratch, so
nothing that depends on position (rotor offsets, bias state) survives a
reorder.

Failure policy: when a stage raises a ModuleError the error is recorded
for that stage and the stage's own input is forwarded unchanged to the
next stage. Any other exception escaping a module is recorded the same
way, wrapped in a DecodeError. Later stages still run, but the pipeline's
final output is an error as soon as any stage failed.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .errors import BoundsError, ConfigError, DecodeError, ModuleError
from .framework import TransformModule
from .log import log_info, log_warn
from .registry import module_from_record

PIPELINE_FORMAT_VERSION = 1


@dataclass(frozen=True)
class StageResult:
    position: int
    module: str
    input: str
    output: Optional[str] = None
    error: Optional[ModuleError] = None
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class PipelineOutput:
    text: Optional[str]
    error: Optional[ModuleError] = None
    failed_position: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Pipeline:
    """Ordered, mutable sequence of modules with per-stage results."""

    def __init__(self, input_text: str = "", modules: Iterable[TransformModule] = ()):
        self._modules: List[TransformModule] = list(modules)
        self._input = input_text
        self._results: List[StageResult] = []
        self._output = PipelineOutput(input_text)
        self.recompute()

    # ==========================================
    #  MUTATION (each triggers a recompute)
    # ==========================================

    def _check(self, position: int, upper: int):
        if not isinstance(position, int) or isinstance(position, bool) or not 0 <= position < upper:
            raise BoundsError(
                f"Position {position!r} out of range for pipeline of {len(self._modules)} module(s)",
                position, len(self._modules))

    def insert(self, position: int, module: TransformModule):
        self._check(position, len(self._modules) + 1)
        self._modules.insert(position, module)
        self.recompute()

    def append(self, module: TransformModule):
        self.insert(len(self._modules), module)

    def remove(self, position: int) -> TransformModule:
        self._check(position, len(self._modules))
        module = self._modules.pop(position)
        self.recompute()
        return module

    def move(self, src: int, dst: int):
        self._check(src, len(self._modules))
        self._check(dst, len(self._modules))
        module = self._modules.pop(src)
        self._modules.insert(dst, module)
        self.recompute()

    def set_enabled(self, position: int, enabled: bool):
        self._check(position, len(self._modules))
        self._modules[position].enabled = bool(enabled)
        self.recompute()

    def set_direction(self, position: int, direction):
        self._check(position, len(self._modules))
        self._modules[position].set_direction(direction)
        self.recompute()

    def configure(self, position: int, **params):
        self._check(position, len(self._modules))
        self._modules[position].configure(**params)
        self.recompute()

    def set_input(self, text: str):
        self._input = text
        self.recompute()

    def clear(self):
        self._modules.clear()
        self.recompute()

    # ==========================================
    #  RECOMPUTE
    # ==========================================

    def recompute(self):
        results = []
        current = self._input
        first_error = None
        failed_position = None

        for position, module in enumerate(self._modules):
            if not module.enabled:
                results.append(StageResult(position, module.name, current, current, skipped=True))
                continue
            try:
                output = module.process(current)
            except ModuleError as e:
                error = e
                if error.module is None:
                    error.module = module.name
            except Exception as e:
                error = DecodeError(f"Unexpected {type(e).__name__}: {e}", module.name)
                error.__cause__ = e
            else:
                results.append(StageResult(position, module.name, current, output))
                current = output
                continue
            log_warn(f"Stage {position} ({module.name}) failed: {error}. Forwarding its input.")
            results.append(StageResult(position, module.name, current, error=error))
            if first_error is None:
                first_error, failed_position = error, position

        self._results = results
        if first_error is not None:
            self._output = PipelineOutput(None, first_error, failed_position)
        else:
            self._output = PipelineOutput(current)

    # ==========================================
    #  QUERIES
    # ==========================================

    @property
    def input(self) -> str:
        return self._input

    @property
    def modules(self) -> List[TransformModule]:
        return list(self._modules)

    def __len__(self):
        return len(self._modules)

    def __getitem__(self, position: int) -> TransformModule:
        self._check(position, len(self._modules))
        return self._modules[position]

    def stage_results(self) -> List[StageResult]:
        return list(self._results)

    def final_output(self) -> PipelineOutput:
        return self._output

    def inverted(self) -> "Pipeline":
        """Copy with order reversed and every directional module flipped."""
        flipped = []
        for module in reversed(self._modules):
            clone = module.copy()
            if clone.HAS_DIRECTION:
                clone.direction = clone.direction.flipped()
            flipped.append(clone)
        return Pipeline(self._input, flipped)

    # ==========================================
    #  PERSISTENCE
    # ==========================================

    def to_records(self) -> List[Dict[str, Any]]:
        return [module.to_record() for module in self._modules]

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]], input_text: str = "") -> "Pipeline":
        return cls(input_text, [module_from_record(record) for record in records])

    def dumps(self, indent: int = 2) -> str:
        document = {"version": PIPELINE_FORMAT_VERSION, "modules": self.to_records()}
        return json.dumps(document, indent=indent, ensure_ascii=False)

    @classmethod
    def loads(cls, data: str, input_text: str = "") -> "Pipeline":
        try:
            document = json.loads(data)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Pipeline document is not valid JSON: {e}") from e
        if isinstance(document, list):
            records = document
        elif isinstance(document, dict) and isinstance(document.get("modules"), list):
            version = document.get("version", PIPELINE_FORMAT_VERSION)
            if version != PIPELINE_FORMAT_VERSION:
                raise ConfigError(f"Unsupported pipeline document version: {version}")
            records = document["modules"]
        else:
            raise ConfigError("Pipeline document must be a list of modules or {'modules': [...]}")
        return cls.from_records(records, input_text)

    def save(self, path: Union[str, Path]):
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.dumps())
        log_info(f"Saved pipeline with {len(self)} module(s) to {path}")

    @classmethod
    def load(cls, path: Union[str, Path], input_text: str = "") -> "Pipeline":
        with open(path, "r", encoding="utf-8") as f:
            pipeline = cls.loads(f.read(), input_text)
        log_info(f"Loaded pipeline with {len(pipeline)} module(s) from {path}")
        return pipeline
