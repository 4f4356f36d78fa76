import pytest

from malt.printer import pr_str
from malt.reader.parser import read_str
from malt.types.nil import FALSE, Nil, TRUE
from malt.types.symbol import Keyword, Symbol


@pytest.mark.parametrize(
    "value, readable, display",
    [
        (Nil, "nil", "nil"),
        (TRUE, "true", "true"),
        (FALSE, "false", "false"),
        (-12, "-12", "-12"),
        (Symbol("abc"), "abc", "abc"),
        (Keyword("kw"), ":kw", ":kw"),
        ("plain", '"plain"', "plain"),
        ('say "hi"\n', '"say \\"hi\\"\\n"', 'say "hi"\n'),
        ("back\\slash", '"back\\\\slash"', "back\\slash"),
    ],
)
def test_scalars(value, readable, display):
    assert pr_str(value, True) == readable
    assert pr_str(value, False) == display


@pytest.mark.parametrize(
    "code, expected",
    [
        ("(list 1 (list 2 3) [4])", "(1 (2 3) [4])"),
        ("(hash-map :a 1)", "{:a 1}"),
        ('{"k" "v"}', '{"k" "v"}'),
        ("(atom [1])", "(atom [1])"),
        ("(fn* () 1)", "#function"),
        ("+", "#function"),
        ("(cons 1 (lazy-seq (list 2)))", "(1 . #lazy)"),
        ("(let* (s (lazy-seq (list 2))) (do (first s) (cons 1 s)))", "(1 2)"),
    ],
)
def test_collections_and_functions(interp, code, expected):
    assert interp.rep(code) == expected


def test_pr_str_and_str(interp):
    assert interp.eval('(pr-str "a" 1 :b)') == '"a" 1 :b'
    assert interp.eval('(pr-str "a\\nb")') == '"a\\nb"'
    assert interp.eval('(str "a" 1 :b nil)') == "a1:bnil"
    assert interp.eval('(str (list "x" 2))') == "(x 2)"
    assert interp.eval("(str)") == ""


def test_prn_and_println(interp, capsys):
    assert interp.rep('(prn "a" [1 "b"])') == "nil"
    interp.eval('(println "a" [1 "b"])')
    captured = capsys.readouterr()
    assert captured.out == '"a" [1 "b"]\na [1 b]\n'


def test_readable_output_reads_back(interp):
    code = '[1 "two" :three (four) {"five" 5}]'
    printed = interp.rep(code)
    assert pr_str(read_str(printed), True) == printed


def test_long_list_prints_without_recursion(interp):
    interp.eval("(def! build (fn* (n acc) (if (= n 0) acc (build (- n 1) (cons n acc)))))")
    printed = interp.rep("(build 20000 ())")
    assert printed.startswith("(1 2 3")
    assert printed.endswith("19999 20000)")
