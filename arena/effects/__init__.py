"""
Effects package for the arena.

The registry of effect types. The processor applying and ticking effects
lives in effects.processor, since it depends on the combat log.
"""

from .registry import (
    EffectCategory,
    EffectDescriptor,
    EffectType,
    all_descriptors,
    capitalize,
    describe,
    get_descriptor,
    is_known,
)

__all__ = [
    "EffectCategory",
    "EffectDescriptor",
    "EffectType",
    "all_descriptors",
    "capitalize",
    "describe",
    "get_descriptor",
    "is_known",
]
