import pytest

from malt import config
from malt.interpreter import Interpreter
from malt.types.persistent import SegmentedList


def test_defaults(monkeypatch):
    for var in ("MALT_SEGMENT_SIZE", "MALT_DEBUG_EVAL"):
        monkeypatch.delenv(var, raising=False)
    assert config.get_segment_size() == 64
    assert config.get_debug_eval() is False


def test_segment_size_from_env(monkeypatch):
    monkeypatch.setenv("MALT_SEGMENT_SIZE", "2")
    assert SegmentedList.empty().capacity == 2
    assert SegmentedList.of([1, 2, 3]).capacity == 2


@pytest.mark.parametrize("raw", ["abc", "0", "-3"])
def test_invalid_integer_settings_are_rejected(monkeypatch, raw):
    monkeypatch.setenv("MALT_SEGMENT_SIZE", raw)
    with pytest.raises(ValueError, match="MALT_SEGMENT_SIZE"):
        config.get_segment_size()


@pytest.mark.parametrize("raw, expected", [("1", True), ("yes", True), ("0", False), ("", False)])
def test_flag_parsing(monkeypatch, raw, expected):
    monkeypatch.setenv("MALT_DEBUG_EVAL", raw)
    assert config.get_debug_eval() is expected


def test_debug_eval_prints_each_form(capsys):
    interp = Interpreter(debug_eval=True)
    capsys.readouterr()
    interp.eval("(+ 1 2)")
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "EVAL: (+ 1 2)"
    assert "EVAL: +" in out
    assert "EVAL: 1" in out


def test_debug_eval_from_environment(monkeypatch, capsys):
    monkeypatch.setenv("MALT_DEBUG_EVAL", "1")
    interp = Interpreter(prelude=None)
    interp.eval("7")
    assert capsys.readouterr().out == "EVAL: 7\n"


def test_debug_eval_binding_is_scoped(interp, capsys):
    interp.eval("(let* (DEBUG-EVAL true) (+ 1 2))")
    out = capsys.readouterr().out
    assert "EVAL: (+ 1 2)" in out
    interp.eval("(* 2 3)")
    assert capsys.readouterr().out == ""
