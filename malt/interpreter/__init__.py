from __future__ import annotations

from malt import LispValue
from malt.builtin.env_builtin import register
from malt.config import get_debug_eval
from malt.errors import EvalError
from malt.evaluation.evaluator import eval_form, evaluate
from malt.printer import pr_str
from malt.reader.parser import read_all
from malt.types.environment import Environment
from malt.types.nil import Nil, TRUE, FALSE
from malt.types.symbol import DEBUG_EVAL, Symbol

# Definitions written in the language itself, loaded into every root env
PRELUDE = """
(def! not (fn* (a) (if a false true)))
(defmacro! cond
  (fn* (& xs)
    (if (> (count xs) 0)
      (list 'if (first xs)
        (if (> (count xs) 1)
          (nth xs 1)
          (throw "odd number of forms to cond"))
        (cons 'cond (rest (rest xs)))))))
"""


class Interpreter:
    """
    Orchestrates reading and evaluating malt code.
    Maintains one root Environment across calls.
    """

    def __init__(self, prelude: str | None = PRELUDE, debug_eval: bool | None = None):
        if debug_eval is None:
            debug_eval = get_debug_eval()
        self.env: Environment = Environment()
        register(self.env)
        self.env.update(
            {
                Symbol("eval"): self._eval_builtin,
                Symbol("*host-language*"): "python",
                DEBUG_EVAL: TRUE if debug_eval else FALSE,
            }
        )
        if prelude:
            self.eval_prelude(prelude)

    def _eval_builtin(self, env: Environment, args: list[LispValue]):
        """(eval form): always in the root environment, in tail position."""
        if len(args) != 1:
            raise EvalError(f"eval requires exactly 1 argument, got {len(args)}")
        return evaluate(args[0], self.env)

    def eval_prelude(self, code: str) -> None:
        for expr in read_all(code):
            eval_form(expr, self.env)

    def eval(self, code: str) -> LispValue:
        """Evaluate every form in `code`; returns the last value, or nil."""
        result: LispValue = Nil
        for expr in read_all(code):
            result = eval_form(expr, self.env)
        return result

    def rep(self, code: str) -> str:
        """Read, evaluate and print: the readable form of the last value."""
        return pr_str(self.eval(code), True)
