"""Exclusion rules deciding which files must not have their content diffed."""

from .base_rules import BaseExclusionRules
from .matchers import (
    LiteralMatcher,
    PathMatcher,
    RegexMatcher,
    SimpleRegexMatcher,
    WildmatchMatcher,
    compile_matcher,
)
from .nodiff_rules import NodiffConfig, NodiffRulesBuilder, is_excluded, load_nodiff_config

__all__ = [
    "BaseExclusionRules",
    "LiteralMatcher",
    "NodiffConfig",
    "NodiffRulesBuilder",
    "PathMatcher",
    "RegexMatcher",
    "SimpleRegexMatcher",
    "WildmatchMatcher",
    "compile_matcher",
    "is_excluded",
    "load_nodiff_config",
]
