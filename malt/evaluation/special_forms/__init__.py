"""Registry of special forms for the malt evaluator.

Maps Symbols to handler functions that implement non-standard evaluation rules.
The evaluator consults this table to dispatch special forms before ordinary
function application. Every handler takes (tail, env, evaluate_fn) and returns
a Trampoline.
"""

from malt.types.symbol import Symbol
from malt.evaluation.special_forms.define_form import define_form
from malt.evaluation.special_forms.defmacro_form import defmacro_form
from malt.evaluation.special_forms.let_form import let_form
from malt.evaluation.special_forms.progn_form import progn_form
from malt.evaluation.special_forms.if_form import if_form
from malt.evaluation.special_forms.lambda_form import lambda_form
from malt.evaluation.special_forms.quote_forms import quote_form, quasiquote_form, unquote_form, unquote_splice_form
from malt.evaluation.special_forms.try_catch_form import try_catch_form
from malt.evaluation.special_forms.lazy_seq_form import lazy_seq_form
from malt.evaluation.special_forms.spawn_form import spawn_form
from malt.evaluation.special_forms.macroexpand_forms import macroexpand_form, macroexpand_1_form

SPECIAL_FORMS = {
    Symbol("def!"): define_form,
    Symbol("defmacro!"): defmacro_form,
    Symbol("let*"): let_form,
    Symbol("do"): progn_form,
    Symbol("if"): if_form,
    Symbol("fn*"): lambda_form,
    Symbol("quote"): quote_form,
    Symbol("quasiquote"): quasiquote_form,
    Symbol("unquote"): unquote_form,
    Symbol("splice-unquote"): unquote_splice_form,
    Symbol("try*"): try_catch_form,
    Symbol("lazy-seq"): lazy_seq_form,
    Symbol("spawn"): spawn_form,
    Symbol("macroexpand"): macroexpand_form,
    Symbol("macroexpand-1"): macroexpand_1_form,
}
