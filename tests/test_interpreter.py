import io

import pytest

from letlang.ast import Call, Node, Operation, Value
from letlang.errors import (
    ArityMismatch, DivisionByZero, LangError, NotCallable, NumericOverflow, TypeMismatch,
    UnboundVariable, UnexpectedNode, UnknownOperator,
)
from letlang.interpreter import Interpreter, run_file, run_source
from letlang.types import FunctionValue


def test_calculation():
    assert run_source('1 +   1;') == [2]
    assert run_source('4*4 - 2;') == [14]
    assert run_source('3 + 4 * 2;') == [11]
    assert run_source('(3 + 4) * 2;') == [14]


def test_let_binds_a_variable_to_a_value(capsys):
    code = """
    let a := 5 + 7;
    print 2 * (3 + 5) / 4 + a;
"""
    assert run_source(code) == [12, '16']
    assert capsys.readouterr().out == '16\n'


def test_define_a_function(capsys):
    code = """
    let x := 10;
    let f := \\x y -> x + y;
    f 3 4;
    print x;
  """
    assert run_source(code) == [10, 'fn', 7, '10']
    assert capsys.readouterr().out == '10\n'


def test_division_is_real_division():
    assert run_source('7 / 2') == [3.5]
    result = run_source('8 / 4')
    assert result == [2]
    assert isinstance(result[0], int)


def test_exact_division_of_large_integers_stays_exact():
    assert run_source('100000000000000001 / 1') == [100000000000000001]
    big = '1' + '0' * 400
    assert run_source(big + ' / 10') == [10 ** 399]


def test_division_too_large_for_a_float():
    big = '1' + '0' * 400
    with pytest.raises(NumericOverflow) as excinfo:
        run_source(big + ' / 3')
    assert excinfo.value.position == 402


def test_comparisons_produce_booleans():
    assert run_source('1 < 2; 2 = 3; 2 != 3; 3 >= 3; 2 <= 1; 3 > 1') == [
        True, False, True, True, False, True,
    ]


def test_print_renders_booleans(capsys):
    assert run_source('print 1 < 2') == ['true']
    assert capsys.readouterr().out == 'true\n'


def test_conditional_only_evaluates_the_selected_branch():
    assert run_source('if 1 > 2 then (1/0) else 3') == [3]
    assert run_source('if 2 > 1 then 3 else (1/0)') == [3]


def test_conditional_truthiness():
    assert run_source('if 0 then 1 else 2') == [2]
    assert run_source('if 2 - 1 then 1 else 2') == [1]
    assert run_source('if {} then 1 else 2') == [1]


def test_references_reevaluate_their_expression(capsys):
    assert run_source('let a := print 5; a; a') == ['5', '5', '5']
    assert capsys.readouterr().out == '5\n5\n5\n'


def test_call_scope_does_not_leak():
    code = 'let x := 10; let f := \\y -> {let x := y; x}; f 3; x'
    assert run_source(code) == [10, 'fn', [3, 3], 10]


def test_lambda_evaluates_to_a_function_value():
    [result] = run_source('\\a b -> a')
    assert isinstance(result, FunctionValue)
    assert result.params == ['a', 'b']
    assert repr(result) == '<fn a b>'


def test_functions_bound_by_reference_are_callable():
    assert run_source('let f := \\n -> n * 2; let g := f; g 4')[2] == 8


def test_recursion():
    code = 'let fact := \\n -> if n < 1 then 1 else n * fact (n - 1); fact 6'
    assert run_source(code)[1] == 720


def test_deep_recursion():
    code = 'let s := \\n -> if n < 1 then 0 else n + s (n - 1); s 400'
    assert run_source(code) == ['fn', 80200]


def test_arguments_are_evaluated_in_the_caller_scope():
    # binding x to 1 must not change what the second argument x refers to
    code = 'let x := 5; let f := \\x y -> x + y; f 1 x'
    assert run_source(code)[2] == 6


def test_arity_mismatch_does_not_run_the_body(capsys):
    interp = Interpreter()
    with pytest.raises(ArityMismatch) as excinfo:
        run_source('let f := \\x -> print x; f 1 2', interp)
    err = excinfo.value
    assert (err.name, err.expected, err.given) == ('f', 1, 2)
    assert err.position == 24
    assert err.message == 'Arity of "f" is 1, but 2 given'
    assert capsys.readouterr().out == ''
    assert interp.memory.depth == 0


def test_print_takes_exactly_one_argument():
    with pytest.raises(ArityMismatch) as excinfo:
        run_source('(print 1 2)')
    assert excinfo.value.name == 'print'


def test_unbound_variable():
    with pytest.raises(UnboundVariable) as excinfo:
        run_source('1 + yy')
    assert excinfo.value.name == 'yy'
    assert excinfo.value.position == 4


def test_unbound_function():
    with pytest.raises(UnboundVariable):
        run_source('g 1')


def test_calling_a_number_fails():
    with pytest.raises(NotCallable) as excinfo:
        run_source('let x := 5; x 1')
    assert excinfo.value.position == 12


def test_division_by_zero():
    with pytest.raises(DivisionByZero) as excinfo:
        run_source('1 / 0')
    assert excinfo.value.position == 2


def test_booleans_are_not_numbers():
    with pytest.raises(TypeMismatch):
        run_source('(1 < 2) + 1')


def test_loop_collects_each_iteration(capsys):
    assert run_source('loop 3 7') == [[7, 7, 7]]
    assert run_source('loop 0 1') == [[]]
    assert run_source('let n := 2; loop n print n') == [2, ['2', '2']]
    assert capsys.readouterr().out == '2\n2\n'


def test_loop_in_expression_position():
    assert run_source('(loop 2 3)') == [[3, 3]]
    assert run_source('let n := loop 2 {1; 2}; n') == [[[1, 2], [1, 2]], [[1, 2], [1, 2]]]


def test_loop_count_must_be_a_non_negative_integer():
    with pytest.raises(TypeMismatch):
        run_source('loop (0 - 1) 1')
    with pytest.raises(TypeMismatch):
        run_source('loop (1 < 2) 1')
    with pytest.raises(TypeMismatch):
        run_source('loop (3 / 2) 1')


def test_interpreter_keeps_state_between_runs():
    interp = Interpreter()
    run_source('let a := 2', interp)
    assert run_source('a * 3', interp) == [6]
    with pytest.raises(UnboundVariable):
        run_source('a', Interpreter())


def test_unknown_operator():
    with pytest.raises(UnknownOperator):
        Interpreter().run(Operation(0, '%', Value(0, 1), Value(0, 2)))


def test_unexpected_node():
    with pytest.raises(UnexpectedNode) as excinfo:
        Interpreter().evaluate(Node(3))
    assert excinfo.value.position == 3


def test_errors_share_one_base_type():
    for error_type in (ArityMismatch, DivisionByZero, NotCallable, NumericOverflow, TypeMismatch,
                       UnboundVariable, UnexpectedNode, UnknownOperator):
        assert issubclass(error_type, LangError)


def test_output_channel():
    out = io.StringIO()
    interp = Interpreter(output=out)
    interp.run(Call(0, 'print', [Value(0, 42)]))
    assert out.getvalue() == '42\n'


def test_debug_trace(tmp_path):
    debug_file = tmp_path / 'debug.txt'
    interp = Interpreter(debug_level=3, debug_file=str(debug_file))
    run_source('let f := \\n -> n; f 1; if 1 then 2 else 3', interp)
    interp.close()
    trace = debug_file.read_text(encoding='utf-8').splitlines()
    assert trace == [
        'assign f := <fn n>',
        'call f/1 (depth 1)',
        'return from f (depth 0)',
        'if condition 1 -> True',
    ]


def test_debug_trace_to_stdout(capsys):
    interp = Interpreter(debug_level=2, debug_file=None)
    run_source('let a := 1', interp)
    assert capsys.readouterr().out == 'assign a := 1\n'


def test_run_file(tmp_path, capsys):
    program = tmp_path / 'hello.let'
    program.write_text('print 6 * 7', encoding='utf-8')
    assert run_file(str(program)) == ['42']
    assert capsys.readouterr().out == '42\n'
