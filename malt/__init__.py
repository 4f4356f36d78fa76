# Core type aliases for malt's data model.
# Numbers and strings are plain Python int/str; every other variant has its
# own class under malt.types. Code and data share one representation.
#
# Naming guidance:
# - SExpression: use in reader/macro code to denote syntactic forms.
# - LispValue:  use in evaluator/runtime code to denote evaluated values.

from typing import Any, Callable

__version__ = "0.1.0"

# Runtime value alias
LispValue = Any
# Forms and values are interchangeable
SExpression = LispValue

# Evaluator function type handed to special forms and apply
EvaluatorFn = Callable[..., Any]
