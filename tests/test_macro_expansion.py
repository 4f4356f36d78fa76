import pytest

from malt.errors import EvalError


@pytest.fixture
def macro_interp(interp):
    interp.eval("(defmacro! unless (fn* (pred a b) `(if ~pred ~b ~a)))")
    interp.eval("(defmacro! unless2 (fn* (pred a b) (list 'unless pred a b)))")
    return interp


def test_macro_expands_and_evaluates(macro_interp):
    assert macro_interp.rep("(unless false 7 8)") == "7"
    assert macro_interp.rep("(unless true 7 8)") == "8"


def test_macro_arguments_are_not_evaluated(macro_interp):
    macro_interp.eval("(defmacro! first-form (fn* (& forms) (list 'quote (first forms))))")
    assert macro_interp.rep("(first-form (undefined 1 2) also-undefined)") == "(undefined 1 2)"


def test_macro_only_evaluates_the_chosen_branch(macro_interp):
    macro_interp.eval("(def! hits (atom 0))")
    macro_interp.eval("(unless true (swap! hits + 1) :skipped)")
    assert macro_interp.eval("@hits") == 0


def test_macroexpand_repeats_until_head_is_not_a_macro(macro_interp):
    assert macro_interp.rep("(macroexpand (unless2 x y z))") == "(if x z y)"


def test_macroexpand_1_expands_once(macro_interp):
    assert macro_interp.rep("(macroexpand-1 (unless2 x y z))") == "(unless x y z)"


def test_macroexpand_leaves_non_macro_forms_alone(macro_interp):
    assert macro_interp.rep("(macroexpand (+ 1 2))") == "(+ 1 2)"
    assert macro_interp.rep("(macroexpand 5)") == "5"


def test_macro_and_fn_predicates(macro_interp):
    assert macro_interp.rep("(macro? unless)") == "true"
    assert macro_interp.rep("(fn? unless)") == "false"
    assert macro_interp.rep("(fn? +)") == "true"
    assert macro_interp.rep("(fn? (fn* () 1))") == "true"
    assert macro_interp.rep("(macro? (fn* () 1))") == "false"


def test_defmacro_does_not_mutate_the_function(interp):
    interp.eval("(def! f (fn* (x) (list 'quote x)))")
    interp.eval("(defmacro! m f)")
    assert interp.rep("(macro? m)") == "true"
    assert interp.rep("(macro? f)") == "false"
    assert interp.rep("(f 1)") == "(quote 1)"


def test_defmacro_requires_a_closure(interp):
    with pytest.raises(EvalError, match="defmacro! expects a function"):
        interp.eval("(defmacro! m 1)")
    with pytest.raises(EvalError, match="defmacro! expects a function"):
        interp.eval("(defmacro! m +)")


def test_recursive_macro(interp):
    interp.eval(
        """
        (defmacro! my-or
          (fn* (& xs)
            (if (empty? xs)
              nil
              `(let* (or_val ~(first xs))
                 (if or_val or_val (my-or ~@(rest xs)))))))
        """
    )
    assert interp.rep("(my-or false nil 3 4)") == "3"
    assert interp.rep("(my-or false nil)") == "nil"


def test_cond_with_odd_forms_fails_at_expansion(interp):
    with pytest.raises(Exception, match="odd number of forms to cond"):
        interp.eval("(cond true)")


def test_macro_body_can_choose_between_unevaluated_forms(interp):
    interp.eval("(defmacro! pick (fn* (p a b) (if p b a)))")
    assert interp.rep("(pick false 1 2)") == "1"
    assert interp.rep("(pick true 1 2)") == "2"
