"""
cipherchain: a pipeline of reversible text transforms.

    >>> from cipherchain import Pipeline, create
    >>> p = Pipeline("abc", [create("caesar", shift=3), create("reverse")])
    >>> p.final_output().text
    'fed'
"""

__version__ = "1.0.0"

from .errors import (BoundsError, CipherChainError, ConfigError, DecodeError,
                     ModuleError, UnknownModuleError)
from .framework import Direction, Param, SymmetricModule, TransformModule, register_module
from .pipeline import Pipeline, PipelineOutput, StageResult
from .registry import available_modules, create, module_from_record

__all__ = [
    "BoundsError", "CipherChainError", "ConfigError", "DecodeError", "ModuleError",
    "UnknownModuleError", "Direction", "Param", "SymmetricModule", "TransformModule",
    "register_module", "Pipeline", "PipelineOutput", "StageResult",
    "available_modules", "create", "module_from_record",
]
