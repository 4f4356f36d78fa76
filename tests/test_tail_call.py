from malt.types.symbol import Keyword


def test_tail_recursive_loop_runs_in_constant_stack(interp):
    interp.eval("(def! loop (fn* (n) (if (= n 0) 0 (loop (- n 1)))))")
    assert interp.eval("(loop 100000)") == 0


def test_tail_recursive_accumulator(interp):
    interp.eval(
        """
        (def! sum-to
          (fn* (n acc)
            (if (= n 0)
                acc
                (sum-to (- n 1) (+ acc n)))))
        """
    )
    assert interp.eval("(sum-to 100000 0)") == 5000050000


def test_mutual_recursion(interp):
    interp.eval("(def! even? (fn* (n) (if (= n 0) true (odd? (- n 1)))))")
    interp.eval("(def! odd? (fn* (n) (if (= n 0) false (even? (- n 1)))))")
    assert interp.rep("(even? 20000)") == "true"
    assert interp.rep("(odd? 20001)") == "true"


def test_tail_position_through_do_and_let(interp):
    interp.eval(
        """
        (def! spin
          (fn* (n)
            (do nil
              (let* (m (- n 1))
                (if (= n 0) :done (spin m))))))
        """
    )
    assert interp.eval("(spin 50000)") == Keyword("done")


def test_non_tail_recursion_is_not_limited_by_host_stack(interp):
    interp.eval("(def! count-up (fn* (n) (if (= n 0) 0 (+ 1 (count-up (- n 1))))))")
    assert interp.eval("(count-up 20000)") == 20000


def test_tail_call_through_apply_and_eval(interp):
    interp.eval("(def! via-apply (fn* (n) (if (= n 0) :ok (apply via-apply [(- n 1)]))))")
    assert interp.rep("(via-apply 20000)") == ":ok"
    interp.eval("(def! via-eval (fn* (n) (if (= n 0) :ok (eval (list 'via-eval (- n 1))))))")
    assert interp.rep("(via-eval 20000)") == ":ok"


def test_macro_generated_loop(interp):
    interp.eval("(defmacro! unless (fn* (c a b) (list 'if c b a)))")
    interp.eval("(def! down (fn* (n) (unless (= n 0) (down (- n 1)) :bottom)))")
    assert interp.rep("(down 30000)") == ":bottom"
