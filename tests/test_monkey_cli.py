import Monkey


def test_run_script_prints_result( tmp_path, capsys ):
   script = tmp_path / 'adder.mky'
   script.write_text( 'let newAdder = fn(x) { fn(y) { x + y } };\n'
                      'let addTwo = newAdder(2);\n'
                      'addTwo(40)\n' )
   assert Monkey.main( [ str(script) ] ) == 0
   assert capsys.readouterr( ).out.strip( ) == '42'


def test_run_script_reports_runtime_error( tmp_path, capsys ):
   script = tmp_path / 'broken.mky'
   script.write_text( 'len(1)' )
   assert Monkey.main( [ str(script) ] ) == 1
   assert capsys.readouterr( ).out.strip( ) == "ERROR: argument to 'len' not supported, got INTEGER"


def test_run_script_reports_syntax_errors( tmp_path, capsys ):
   script = tmp_path / 'syntax.mky'
   script.write_text( 'let x 5;' )
   assert Monkey.main( [ str(script) ] ) == 1
   err = capsys.readouterr( ).err
   assert err.startswith( 'Syntax Error: (1,7)' )


def test_main_starts_listener_without_a_script( monkeypatch, capsys ):
   def endOfInput( prompt='' ):
      raise EOFError( )

   monkeypatch.setattr( 'builtins.input', endOfInput )
   assert Monkey.main( [ ] ) == 0
   out = capsys.readouterr( ).out
   assert out.startswith( 'Monkey 0.1.0 (Monkey contributors)' )
   assert out.rstrip( ).endswith( 'Bye.' )
