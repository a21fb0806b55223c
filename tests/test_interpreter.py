import os
import pytest

import ltk_py3.Parser as Parser
from MonkeyAST import Program, Statement
from MonkeyInterpreter import MonkeyInterpreter
from MonkeyObject import MInteger, MBoolean, MString, MArray, MFunction, MError, M_NULL
from MonkeyParser import MonkeyParser


def evalMonkey( source ):
   parser = MonkeyParser( )
   program = parser.parse( source )
   assert parser.errors( ) == [ ]
   return MonkeyInterpreter( ).evalProgram( program )


@pytest.mark.parametrize( 'source, expected', [
   ( '5',                                  5 ),
   ( '-10',                                -10 ),
   ( '5 + 5 + 5 + 5 - 10',                 10 ),
   ( '2 * 2 * 2 * 2 * 2',                  32 ),
   ( '50 / 2 * 2 + 10',                    60 ),
   ( '3 * (3 * 3) + 10',                   37 ),
   ( '(5 + 10 * 2 + 15 / 3) * 2 + -10',    50 ),
   ( '7 / 2',                              3 ),
   ( '-7 / 2',                             -3 ),
   ( '7 / -2',                             -3 ),
   ( '2147483647 + 1',                     -2147483648 ),
   ( '-2147483647 - 2',                    2147483647 ),
   ( '65536 * 65536',                      0 ),
   ( '-(-2147483647 - 1)',                 -2147483648 ),
   ] )
def test_integer_arithmetic( source, expected ):
   assert evalMonkey( source ) == MInteger( expected )


@pytest.mark.parametrize( 'source, expected', [
   ( 'true',              True ),
   ( '1 < 2',             True ),
   ( '1 > 2',             False ),
   ( '1 == 1',            True ),
   ( '1 != 1',            False ),
   ( 'true == true',      True ),
   ( 'true != false',     True ),
   ( '(1 < 2) == false',  False ),
   ] )
def test_boolean_expressions( source, expected ):
   assert evalMonkey( source ) == MBoolean( expected )


@pytest.mark.parametrize( 'source, expected', [
   ( '!true',                                False ),
   ( '!false',                               True ),
   ( '!0',                                   True ),
   ( '!5',                                   False ),
   ( '!""',                                  False ),
   ( '![]',                                  False ),
   ( '!fn(x) { x }',                         False ),
   ( 'let n = if (false) { 1 }; !n',         True ),
   ( '!!0',                                  False ),
   ] )
def test_bang_follows_truthiness( source, expected ):
   assert evalMonkey( source ) == MBoolean( expected )


@pytest.mark.parametrize( 'source, expected', [
   ( 'if (true) { 10 }',                  MInteger(10) ),
   ( 'if (false) { 10 }',                 M_NULL ),
   ( 'if (1) { 10 }',                     MInteger(10) ),
   ( 'if (0) { 10 }',                     M_NULL ),
   ( 'if (1 < 2) { 10 } else { 20 }',     MInteger(10) ),
   ( 'if (1 > 2) { 10 } else { 20 }',     MInteger(20) ),
   ( 'if ("") { 10 } else { 20 }',        MInteger(10) ),
   ( 'if (true) { }',                     M_NULL ),
   ] )
def test_if_expressions( source, expected ):
   assert evalMonkey( source ) == expected


@pytest.mark.parametrize( 'source, expected', [
   ( 'return 10;',                                                     10 ),
   ( 'return 10; 9;',                                                  10 ),
   ( '9; return 2 * 5; 9;',                                            10 ),
   ( 'if (10 > 1) { if (10 > 1) { return 10; } return 1; }',           10 ),
   ( 'let f = fn(x) { return x; x + 10; }; f(10);',                    10 ),
   ( 'let f = fn() { if (true) { return 1; } return 2; }; f() + 1',    2 ),
   ( 'let x = if (true) { return 3; }; 99',                            3 ),
   ( '[if (true) { return 1; }]',                                      1 ),
   ( '[7, if (true) { return 1; }, 8]',                                1 ),
   ( '1 + if (true) { return 2; }',                                    2 ),
   ( 'if (true) { return 2; } + 1',                                    2 ),
   ( '-if (true) { return 4; }',                                       4 ),
   ( 'len(if (true) { return 5; })',                                   5 ),
   ( '[1, 2][if (true) { return 6; }]',                                6 ),
   ( 'if (if (true) { return 7; }) { 8 } else { 9 }',                  7 ),
   ( 'return if (true) { return 8; };',                                8 ),
   ( 'let f = fn() { let a = [if (true) { return 1; }]; 2 }; f()',     1 ),
   ( 'let f = fn() { 1 + if (true) { return 3; } }; f() * 10',         30 ),
   ] )
def test_return_statements( source, expected ):
   assert evalMonkey( source ) == MInteger( expected )


@pytest.mark.parametrize( 'source, expected', [
   ( '5 + true;',                                  'type mismatch: INTEGER + BOOLEAN' ),
   ( '5 + true; 5;',                               'type mismatch: INTEGER + BOOLEAN' ),
   ( '"a" + 1',                                    'type mismatch: STRING + INTEGER' ),
   ( '-true',                                      'unknown operator: -BOOLEAN' ),
   ( '-"a"',                                       'unknown operator: -STRING' ),
   ( 'true + false;',                              'unknown operator: BOOLEAN + BOOLEAN' ),
   ( 'true > false',                               'unknown operator: BOOLEAN > BOOLEAN' ),
   ( '5; true + false; 5',                         'unknown operator: BOOLEAN + BOOLEAN' ),
   ( '"a" - "b"',                                  'unknown operator: STRING - STRING' ),
   ( '"a" == "a"',                                 'unknown operator: STRING == STRING' ),
   ( '[1] + [2]',                                  'unknown operator: ARRAY + ARRAY' ),
   ( 'if (10 > 1) { true + false; }',              'unknown operator: BOOLEAN + BOOLEAN' ),
   ( 'if (10 > 1) { if (10 > 1) { return true + false; } return 1; }',
                                                   'unknown operator: BOOLEAN + BOOLEAN' ),
   ( 'foobar',                                     'identifier not found: foobar' ),
   ( 'if (foobar) { 1 }',                          'identifier not found: foobar' ),
   ( 'let x = foobar; 1',                          'identifier not found: foobar' ),
   ( '[1, foobar, 3]',                             'identifier not found: foobar' ),
   ( 'len(foobar)',                                'identifier not found: foobar' ),
   ( 'foobar[0]',                                  'identifier not found: foobar' ),
   ( '[1][foobar]',                                'identifier not found: foobar' ),
   ( '10 / 0',                                     'division by zero' ),
   ( '5(1)',                                       'not a function: INTEGER' ),
   ( '"f"()',                                      'not a function: STRING' ),
   ( '1[0]',                                       'index operator not supported for INTEGER' ),
   ( '[1]["a"]',                                   'index operator not supported for ARRAY[STRING]' ),
   ( 'return foo; 1',                              'identifier not found: foo' ),
   ] )
def test_error_values( source, expected ):
   assert evalMonkey( source ) == MError( expected )


def test_let_statements():
   assert evalMonkey( 'let a = 5; a;' ) == MInteger( 5 )
   assert evalMonkey( 'let a = 5 * 5; a;' ) == MInteger( 25 )
   assert evalMonkey( 'let a = 5; let b = a; b;' ) == MInteger( 5 )
   assert evalMonkey( 'let a = 5; let b = a; let c = a + b + 5; c;' ) == MInteger( 15 )
   assert evalMonkey( 'let a = 5;' ) == MInteger( 5 )


def test_function_object():
   fn = evalMonkey( 'fn(x) { x + 2; };' )
   assert isinstance( fn, MFunction )
   assert [ param.name for param in fn.parameters ] == [ 'x' ]
   assert fn.source( ) == 'fn (x) { (x + 2); }'


@pytest.mark.parametrize( 'source, expected', [
   ( 'let identity = fn(x) { x; }; identity(5);',              5 ),
   ( 'let identity = fn(x) { return x; }; identity(5);',       5 ),
   ( 'let double = fn(x) { x * 2; }; double(5);',              10 ),
   ( 'let add = fn(x, y) { x + y; }; add(5, 5);',              10 ),
   ( 'let add = fn(x, y) { x + y; }; add(5 + 5, add(5, 5));',  20 ),
   ( 'fn(x) { x; }(5)',                                        5 ),
   ] )
def test_function_application( source, expected ):
   assert evalMonkey( source ) == MInteger( expected )


def test_closures():
   source = '''
      let newAdder = fn(x) {
         fn(y) { x + y };
      };

      let addTwo = newAdder(2);
      addTwo(2);'''
   assert evalMonkey( source ) == MInteger( 4 )


def test_closure_sees_later_bindings_in_its_scope():
   assert evalMonkey( 'let x = 1; let f = fn() { x }; let x = 2; f()' ) == MInteger( 2 )


def test_function_scope_does_not_leak():
   assert evalMonkey( 'let f = fn() { let inner = 1; inner }; f(); inner' ) == MError( 'identifier not found: inner' )
   assert evalMonkey( 'let x = 1; let f = fn(x) { x }; f(5); x' ) == MInteger( 1 )


def test_recursive_function():
   source = 'let fib = fn(n) { if (n < 2) { n } else { fib(n - 1) + fib(n - 2) } }; fib(15)'
   assert evalMonkey( source ) == MInteger( 610 )


def test_extra_arguments_are_ignored():
   assert evalMonkey( 'let f = fn(a, b) { a }; f(1, 2, 3)' ) == MInteger( 1 )


def test_missing_arguments_are_unbound():
   assert evalMonkey( 'let f = fn(a, b) { a }; f(1)' ) == MInteger( 1 )
   assert evalMonkey( 'let f = fn(a, b) { b }; f(1)' ) == MError( 'identifier not found: b' )


def test_strings():
   assert evalMonkey( '"Hello World!"' ) == MString( 'Hello World!' )
   assert evalMonkey( '"Hello" + " " + "World!"' ) == MString( 'Hello World!' )


def test_arrays():
   assert evalMonkey( '[1, 2 * 2, 3 + 3]' ) == MArray( [ MInteger(1), MInteger(4), MInteger(6) ] )
   assert evalMonkey( '[]' ) == MArray( [ ] )


@pytest.mark.parametrize( 'source, expected', [
   ( '[1, 2, 3][0]',                                           MInteger(1) ),
   ( '[1, 2, 3][2]',                                           MInteger(3) ),
   ( 'let i = 0; [1][i];',                                     MInteger(1) ),
   ( '[1, 2, 3][1 + 1];',                                      MInteger(3) ),
   ( 'let myArray = [1, 2, 3]; myArray[0] + myArray[1] + myArray[2];',
                                                               MInteger(6) ),
   ( '[1, 2, 3][3]',                                           M_NULL ),
   ( '[1, 2, 3][-1]',                                          M_NULL ),
   ( '[][0]',                                                  M_NULL ),
   ] )
def test_array_index_expressions( source, expected ):
   assert evalMonkey( source ) == expected


@pytest.mark.parametrize( 'source, expected', [
   ( 'len("")',                    MInteger(0) ),
   ( 'len("four")',                MInteger(4) ),
   ( 'len("hello world")',         MInteger(11) ),
   ( 'len([1, 2, 3])',             MInteger(3) ),
   ( 'len([])',                    MInteger(0) ),
   ( 'len(1)',                     MError( "argument to 'len' not supported, got INTEGER" ) ),
   ( 'len("one", "two")',          MError( 'wrong number of arguments. got=2, want=1' ) ),
   ( 'len()',                      MError( 'wrong number of arguments. got=0, want=1' ) ),
   ( 'first([1, 2, 3])',           MInteger(1) ),
   ( 'first([])',                  M_NULL ),
   ( 'first(1)',                   MError( "argument to 'first' not supported, got INTEGER" ) ),
   ( 'last([1, 2, 3])',            MInteger(3) ),
   ( 'last([])',                   M_NULL ),
   ( 'last(1)',                    MError( "argument to 'last' not supported, got INTEGER" ) ),
   ( 'rest([1, 2, 3])',            MArray( [ MInteger(2), MInteger(3) ] ) ),
   ( 'rest([1])',                  MArray( [ ] ) ),
   ( 'rest([])',                   M_NULL ),
   ( 'tail([1, 2])',               MArray( [ MInteger(2) ] ) ),
   ( 'rest("ab")',                 MError( "argument to 'rest' not supported, got STRING" ) ),
   ( 'push([], 1)',                MArray( [ MInteger(1) ] ) ),
   ( 'push(1, 1)',                 MError( "argument to 'push' not supported, got INTEGER" ) ),
   ( 'push([1])',                  MError( 'wrong number of arguments. got=1, want=2' ) ),
   ] )
def test_builtin_functions( source, expected ):
   assert evalMonkey( source ) == expected


def test_builtins_do_not_mutate_their_arguments():
   assert evalMonkey( 'let a = [1, 2]; let b = push(a, 3); a' ) == MArray( [ MInteger(1), MInteger(2) ] )
   assert evalMonkey( 'let a = [1, 2]; rest(a); a' ) == MArray( [ MInteger(1), MInteger(2) ] )


def test_user_bindings_shadow_builtins():
   assert evalMonkey( 'let len = fn(x) { 42 }; len([1])' ) == MInteger( 42 )


def test_builtin_registry():
   builtins = MonkeyInterpreter.constructBuiltins( )
   assert sorted( builtins.keys() ) == [ 'first', 'last', 'len', 'push', 'rest', 'tail' ]
   assert builtins['tail'].name == 'tail'
   assert builtins['tail'].usage == 'tail(<array>)'
   assert builtins['push'].usage == 'push(<array>, <value>)'


def test_eval_renders_result_and_keeps_session_state():
   interp = MonkeyInterpreter( )
   assert interp.eval( 'let a = 1;' ) == '1'
   assert interp.eval( 'a + 1' ) == '2'
   assert interp.eval( '"hi"' ) == '"hi"'
   assert interp.eval( '[1, "two", [true]]' ) == '[1, "two", [true]]'
   assert interp.eval( 'fn(x, y) { x }' ) == 'fn(x, y) { ... }'
   assert interp.eval( 'first' ) == 'builtin function first'
   assert interp.eval( 'if (false) { 1 }' ) == 'null'
   assert interp.eval( 'nope' ) == 'ERROR: identifier not found: nope'
   assert interp.eval( '' ) == 'null'


def test_reboot_clears_bindings():
   interp = MonkeyInterpreter( )
   interp.eval( 'let a = 1;' )
   interp.reboot( )
   assert interp.eval( 'a' ) == 'ERROR: identifier not found: a'


def test_eval_refuses_programs_with_syntax_errors():
   interp = MonkeyInterpreter( )
   with pytest.raises( Parser.ParseErrorList ) as excInfo:
      interp.eval( 'let x 5; let = 1;' )

   assert [ str(err) for err in excInfo.value.errors ] == [ 'expected next token to be =, got INT(5) instead',
                                                            'expected next token to be IDENT, got = instead' ]
   assert excInfo.value.generateVerboseErrorString( ).count( 'Syntax Error:' ) == 2


def test_unbounded_recursion_raises_and_restores_environment():
   interp = MonkeyInterpreter( )
   with pytest.raises( RecursionError ):
      interp.eval( 'let f = fn(n) { f(n + 1) }; f(0)' )

   assert interp.eval( 'let g = 7; g' ) == '7'
   assert interp.eval( 'f' ) == 'fn(n) { ... }'


def test_unknown_node_type_is_a_host_error():
   with pytest.raises( TypeError ):
      MonkeyInterpreter( ).evalProgram( Program( [ Statement( ) ] ) )


def test_library_and_session_files_exist():
   interp = MonkeyInterpreter( )
   for filename in interp.runtimeLibraries( ) + interp.testFileList( ):
      assert os.path.isfile( filename )
