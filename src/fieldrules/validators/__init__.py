"""Built-in rules for fieldrules.

This module provides the ready-to-use rules that can be referenced from
field annotations once registered.
"""

from fieldrules.validators.builtins import BUILTIN_RULES, register_builtin_rules
from fieldrules.validators.params import PARAM_RULES, register_param_rules


def register_all_rules() -> None:
    """Register every built-in zero-parameter and parameterized rule."""
    register_builtin_rules()
    register_param_rules()


__all__ = [
    "BUILTIN_RULES",
    "PARAM_RULES",
    "register_all_rules",
    "register_builtin_rules",
    "register_param_rules",
]
