import pytest
from hypothesis import given, strategies as st

from malt.errors import ReaderError
from malt.printer import pr_str
from malt.reader.parser import lex, read_all, read_str
from malt.types.nil import FALSE, Nil, TRUE
from malt.types.sequences import LispList, Vector, list_of
from malt.types.symbol import Keyword, Symbol


@pytest.mark.parametrize(
    "source,expected",
    [
        ("a", [("atom", "a")]),
        ("(a b)", [("open", "("), ("atom", "a"), ("atom", "b"), ("close", ")")]),
        ("[1,2]", [("open", "["), ("atom", "1"), ("atom", "2"), ("close", "]")]),
        ("'a", [("macro", "'"), ("atom", "a")]),
        ("~@a", [("splice", "~@"), ("atom", "a")]),
        ("^m", [("macro", "^"), ("atom", "m")]),
        ('"hi there"', [("string", '"hi there"')]),
        ('"a\\"b"', [("string", '"a\\"b"')]),
        (" ; comment\n a, b", [("atom", "a"), ("atom", "b")]),
        ("   ,,, ", []),
    ],
)
def test_lexer_basic(source, expected):
    assert list(lex(source)) == expected


@pytest.mark.parametrize(
    "source, expected",
    [
        ("nil", Nil),
        ("true", TRUE),
        ("false", FALSE),
        ("123", 123),
        ("-45", -45),
        ("-", Symbol("-")),
        ("abc", Symbol("abc")),
        (":kw", Keyword("kw")),
        ('"a\\nb"', "a\nb"),
        ('"tab\\there"', "tab\there"),
        ('"q\\"q"', 'q"q'),
        ('"back\\\\slash"', "back\\slash"),
        ('""', ""),
    ],
)
def test_read_atoms(source, expected):
    result = read_str(source)
    assert type(result) is type(expected)
    assert result == expected


@pytest.mark.parametrize(
    "source, expected",
    [
        ("9223372036854775807", 2 ** 63 - 1),
        ("-9223372036854775808", -(2 ** 63)),
    ],
)
def test_integer_literal_bounds(source, expected):
    assert read_str(source) == expected


@pytest.mark.parametrize(
    "source", ["9223372036854775808", "-9223372036854775809", "99999999999999999999"]
)
def test_integer_literal_out_of_range(source):
    with pytest.raises(ReaderError, match="integer literal out of range"):
        read_str(source)


def test_only_ascii_digits_make_integers():
    assert read_str("١٢") == Symbol("١٢")


def test_read_collections():
    assert isinstance(read_str("(1 2 3)"), LispList)
    assert isinstance(read_str("[1 2 3]"), Vector)
    assert read_str("(1 2 3)") == list_of(1, 2, 3)
    assert read_str("()").is_empty()


@pytest.mark.parametrize(
    "source, expected",
    [
        ("(1 2 3)", "(1 2 3)"),
        ("[1 [2] 3]", "[1 [2] 3]"),
        ("{:a 1}", "{:a 1}"),
        ("( 1 ,2,  3 )", "(1 2 3)"),
        ("'(1 2)", "(quote (1 2))"),
        ("`(a ~b ~@c)", "(quasiquote (a (unquote b) (splice-unquote c)))"),
        ("@a", "(deref a)"),
        ("^{:a 1} [1 2]", "(with-meta [1 2] {:a 1})"),
        ('("x" :y z)', '("x" :y z)'),
        ("(a ; trailing comment\n b)", "(a b)"),
    ],
)
def test_read_then_print(source, expected):
    assert pr_str(read_str(source), True) == expected


@pytest.mark.parametrize(
    "source, message",
    [
        ("(1 2", "expected ')', got EOF"),
        ("[1 2", "expected ']', got EOF"),
        ("{:a 1", "expected '}', got EOF"),
        ('"abc', "expected '\"', got EOF"),
        (")", "unexpected ')'"),
        ("'", "unexpected EOF"),
    ],
)
def test_reader_errors(source, message):
    with pytest.raises(ReaderError) as exc_info:
        read_str(source)
    assert str(exc_info.value) == message


@pytest.mark.parametrize("source", ["{:a}", "{1 2}", "{(1) 2}"])
def test_invalid_map_literals_are_reader_errors(source):
    with pytest.raises(ReaderError):
        read_str(source)


@pytest.mark.parametrize("source", ["", "   ", "; only a comment"])
def test_empty_input_reads_as_nil(source):
    assert read_str(source) is Nil


def test_read_all_yields_every_form():
    forms = list(read_all("1 (a) [b] :c"))
    assert [pr_str(f, True) for f in forms] == ["1", "(a)", "[b]", ":c"]


def test_deep_nesting_is_stack_safe():
    depth = 10_000
    source = "(" * depth + ")" * depth
    assert pr_str(read_str(source), True) == source


def test_long_flat_list():
    source = "(" + " ".join(str(i) for i in range(50_000)) + ")"
    form = read_str(source)
    assert len(form) == 50_000
    assert form.nth(49_999) == 49_999


@given(st.lists(st.integers(min_value=-(2 ** 63), max_value=2 ** 63 - 1), max_size=50))
def test_integer_lists_round_trip(items):
    source = "(" + " ".join(str(i) for i in items) + ")"
    assert pr_str(read_str(source), True) == source


@given(st.text(alphabet=st.characters(blacklist_categories=("Cs",)), max_size=40))
def test_strings_round_trip_through_readable_printing(text):
    assert read_str(pr_str(text, True)) == text
