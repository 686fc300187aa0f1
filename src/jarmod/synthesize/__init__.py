"""Descriptor synthesis stage helpers."""

from jarmod.synthesize.jdeps import (
    JDEPS_FLAGS,
    SynthesisResult,
    build_jdeps_arguments,
    generate_module_info,
    synthesize_descriptors,
)
from jarmod.synthesize.search_path import build_module_search_path

__all__ = [
    "JDEPS_FLAGS",
    "SynthesisResult",
    "build_jdeps_arguments",
    "generate_module_info",
    "synthesize_descriptors",
    "build_module_search_path",
]
