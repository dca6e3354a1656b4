"""CSS generation: rule accumulation, colors and style compilation."""

from .colors import to_rgb
from .rule_set import DEFAULT_PREFIX, CSSRuleSet
from .style_compiler import CompiledStyle, Logo, StyleCompiler

__all__ = [
    "CSSRuleSet",
    "CompiledStyle",
    "DEFAULT_PREFIX",
    "Logo",
    "StyleCompiler",
    "to_rgb",
]
