# try*/catch* handling
# Usage:
#   (try* (throw "boom") (catch* e e))        ; => "boom"
#   (try* (undefined-fn) (catch* e (str e)))  ; => "'undefined-fn' not found"
#
# A value thrown with `throw` is bound as-is. Any other failure (evaluation,
# reader, host) is bound as an error value carrying its message and kind,
# except host stack or memory exhaustion, which always propagates.

from malt import EvaluatorFn
from malt import SExpression
from malt.errors import EvalError, UserError
from malt.types.environment import Environment
from malt.types.error_value import ErrorValue
from malt.types.sequences import LispList
from malt.types.symbol import Symbol
from malt.types.trampoline import Trampoline, done

CATCH = Symbol("catch*")


def _parse_catch(clause: SExpression) -> tuple[Symbol, SExpression]:
    if (
        not isinstance(clause, LispList)
        or len(clause) != 3
        or clause.head() != CATCH
    ):
        raise EvalError("try* expects (catch* name handler)")
    name, handler = clause.nth(1), clause.nth(2)
    if not isinstance(name, Symbol):
        raise EvalError(f"catch* name must be a symbol, got {name!r}")
    return name, handler


def try_catch_form(
    tail: list[SExpression],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> Trampoline:
    if len(tail) not in (1, 2):
        raise EvalError("try* requires a body and an optional catch* clause")
    body = tail[0]
    if len(tail) == 1:
        return evaluate_fn(body, env)

    name, handler = _parse_catch(tail[1])
    # The body runs to completion here so its failures surface inside this block
    try:
        return done(evaluate_fn(body, env).run())
    except UserError as thrown:
        caught = thrown.value
    except (RecursionError, MemoryError):
        # host exhaustion is not a language error; catch* never binds it
        raise
    except Exception as py_ex:
        caught = ErrorValue(py_ex)
    return evaluate_fn(handler, Environment(outer=env, bindings={name: caught}))
