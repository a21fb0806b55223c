from MonkeyAST import ( Node, Program, Statement, Identifier, IntegerLiteral, BooleanLiteral,
                        StringLiteral, PrefixExpression, InfixExpression, IfExpression,
                        FunctionLiteral, CallExpression, ArrayLiteral, IndexExpression,
                        LetStatement, ReturnStatement, ExpressionStatement )
from MonkeyObject import ( MObject, MInteger, MBoolean, MString, MArray, MNull, MFunction,
                           MBuiltin, MReturn, MError, M_TRUE, M_FALSE, M_NULL,
                           nativeBoolToMonkey, isSignal, prettyPrintMonkeyObj )
from MonkeyParser import MonkeyParser
import ltk_py3.Listener as Listener
import ltk_py3.Parser as Parser
from ltk_py3.SymbolTable import SymbolTable

import os
from typing import Callable, Dict, List


INT32_MIN = -2**31
INT32_MODULUS = 2**32

def _wrapInt32( value: int ) -> int:
   '''Reduce value to the signed 32 bit range (two's complement wrap).'''
   return ((value - INT32_MIN) % INT32_MODULUS) + INT32_MIN

def _truncDiv( left: int, right: int ) -> int:
   '''Integer division rounding toward zero.'''
   quotient = abs(left) // abs(right)
   return quotient if (left < 0) == (right < 0) else -quotient


class MonkeyInterpreter( Listener.Interpreter ):
   LIBRARY_DIR = os.path.dirname( os.path.abspath(__file__) )

   def __init__( self ) -> None:
      self._parser: MonkeyParser = MonkeyParser( )
      self._builtins: Dict[str, MBuiltin] = MonkeyInterpreter.constructBuiltins( )
      self._env: SymbolTable = SymbolTable( parent=None )

   def reboot( self ) -> None:
      self._builtins = MonkeyInterpreter.constructBuiltins( )
      self._env = SymbolTable( parent=None )

   def eval( self, inputExprStr: str ) -> str:
      program = self._parser.parse( inputExprStr )
      if self._parser.errors( ):
         raise Parser.ParseErrorList( self._parser.diagnostics() )

      resultObj = self.evalProgram( program )
      return prettyPrintMonkeyObj( resultObj )

   def runtimeLibraries( self ) -> List[str]:
      return [ os.path.join( MonkeyInterpreter.LIBRARY_DIR, 'Library.mky' ) ]

   def testFileList( self ) -> List[str]:
      sessionDir = os.path.join( MonkeyInterpreter.LIBRARY_DIR, 'tests', 'sessions' )
      return [ os.path.join( sessionDir, 'test01-calculations.mky' ),     # Test primitive operations
               os.path.join( sessionDir, 'test02-variables.mky' ),        # Test let bindings and scopes
               os.path.join( sessionDir, 'test03-functions.mky' ),        # Test functions and closures
               os.path.join( sessionDir, 'test04-dataTypes.mky' ),        # Test strings, arrays and builtins
               os.path.join( sessionDir, 'test05-controlStructs.mky' ),   # Test if and return
               os.path.join( sessionDir, 'test06-errors.mky' ),           # Test runtime error values
               ]

   def symbolTableDump( self ) -> List[str]:
      lines: List[str] = [ ]
      env = self._env
      while env is not None:
         lines.append( ', '.join( env.localSymbols() ) )
         env = env.parentEnv( )

      lines.append( 'builtins: ' + ', '.join( sorted( self._builtins ) ) )
      return lines

   def describeSymbol( self, name: str ) -> str:
      if self._env.isDefined( name ):
         value = self._env.getValue( name )
         if isinstance( value, MFunction ):
            return f'{name} = {value.source()}'
         return f'{name} = {prettyPrintMonkeyObj(value)}'

      builtin = self._builtins.get( name )
      if builtin is not None:
         return f'builtin {builtin.usage}'

      return f'{name} is not defined.'

   def evalProgram( self, program: Program ) -> MObject:
      '''Evaluate a parsed program in the session environment.
      A top level return signal is unwrapped to its value.'''
      result = self._evalStatements( program.statements )
      if isinstance( result, MReturn ):
         return result.value

      return result

   @staticmethod
   def isTruthy( monkeyObj: MObject ) -> bool:
      if isinstance( monkeyObj, MBoolean ):
         return monkeyObj.value
      elif isinstance( monkeyObj, MNull ):
         return False
      elif isinstance( monkeyObj, MInteger ):
         return monkeyObj.value != 0
      else:
         return True

   def _mEval( self, node: Node ) -> MObject:
      if isinstance( node, ExpressionStatement ):
         return self._mEval( node.expr )
      elif isinstance( node, LetStatement ):
         value = self._mEval( node.value )
         if isSignal( value ):
            return value

         return self._env.defLocal( node.name.name, value )
      elif isinstance( node, ReturnStatement ):
         value = self._mEval( node.value )
         if isSignal( value ):
            return value

         return MReturn( value )
      elif isinstance( node, IntegerLiteral ):
         return MInteger( node.value )
      elif isinstance( node, BooleanLiteral ):
         return nativeBoolToMonkey( node.value )
      elif isinstance( node, StringLiteral ):
         return MString( node.value )
      elif isinstance( node, Identifier ):
         return self._evalIdentifier( node )
      elif isinstance( node, PrefixExpression ):
         operand = self._mEval( node.operand )
         if isSignal( operand ):
            return operand

         return self._evalPrefixExpression( node.operator, operand )
      elif isinstance( node, InfixExpression ):
         left = self._mEval( node.left )
         if isSignal( left ):
            return left

         right = self._mEval( node.right )
         if isSignal( right ):
            return right

         return self._evalInfixExpression( node.operator, left, right )
      elif isinstance( node, IfExpression ):
         return self._evalIfExpression( node )
      elif isinstance( node, FunctionLiteral ):
         return MFunction( node.parameters, node.body, self._env )
      elif isinstance( node, CallExpression ):
         callee = self._mEval( node.callee )
         if isSignal( callee ):
            return callee

         args = self._evalExpressions( node.arguments )
         if (len(args) == 1) and isSignal( args[0] ):
            return args[0]

         return self._applyFunction( callee, args )
      elif isinstance( node, ArrayLiteral ):
         elements = self._evalExpressions( node.elements )
         if (len(elements) == 1) and isSignal( elements[0] ):
            return elements[0]

         return MArray( elements )
      elif isinstance( node, IndexExpression ):
         collection = self._mEval( node.collection )
         if isSignal( collection ):
            return collection

         index = self._mEval( node.index )
         if isSignal( index ):
            return index

         return self._evalIndexExpression( collection, index )
      else:
         raise TypeError( f'Unknown monkey syntax node {type(node).__name__}.' )

   def _evalStatements( self, statements: List[Statement] ) -> MObject:
      '''Evaluate a statement sequence.  A return or error signal stops the
      sequence and is passed up unchanged.'''
      result: MObject = M_NULL
      for stmt in statements:
         result = self._mEval( stmt )
         if isSignal( result ):
            return result

      return result

   def _evalExpressions( self, exprs: List[Node] ) -> List[MObject]:
      '''Evaluate exprs left to right.  On the first error or return signal
      the result is a list holding only that signal.'''
      results: List[MObject] = [ ]
      for expr in exprs:
         evaluated = self._mEval( expr )
         if isSignal( evaluated ):
            return [ evaluated ]
         results.append( evaluated )

      return results

   def _evalIdentifier( self, node: Identifier ) -> MObject:
      value = self._env.getValue( node.name )
      if value is not None:
         return value

      builtin = self._builtins.get( node.name )
      if builtin is not None:
         return builtin

      return MError( f'identifier not found: {node.name}' )

   def _evalPrefixExpression( self, operator: str, operand: MObject ) -> MObject:
      if operator == '!':
         return M_FALSE if MonkeyInterpreter.isTruthy( operand ) else M_TRUE
      elif operator == '-':
         if not isinstance( operand, MInteger ):
            return MError( f'unknown operator: -{operand.typeName()}' )
         return MInteger( _wrapInt32( -operand.value ) )
      else:
         return MError( f'unknown operator: {operator}{operand.typeName()}' )

   def _evalInfixExpression( self, operator: str, left: MObject, right: MObject ) -> MObject:
      if isinstance( left, MInteger ) and isinstance( right, MInteger ):
         return self._evalIntegerInfixExpression( operator, left.value, right.value )
      elif isinstance( left, MBoolean ) and isinstance( right, MBoolean ):
         if operator == '==':
            return nativeBoolToMonkey( left.value == right.value )
         elif operator == '!=':
            return nativeBoolToMonkey( left.value != right.value )
      elif isinstance( left, MString ) and isinstance( right, MString ):
         if operator == '+':
            return MString( left.value + right.value )
      elif left.typeName() != right.typeName():
         return MError( f'type mismatch: {left.typeName()} {operator} {right.typeName()}' )

      return MError( f'unknown operator: {left.typeName()} {operator} {right.typeName()}' )

   def _evalIntegerInfixExpression( self, operator: str, left: int, right: int ) -> MObject:
      if operator == '+':
         return MInteger( _wrapInt32( left + right ) )
      elif operator == '-':
         return MInteger( _wrapInt32( left - right ) )
      elif operator == '*':
         return MInteger( _wrapInt32( left * right ) )
      elif operator == '/':
         if right == 0:
            return MError( 'division by zero' )
         return MInteger( _wrapInt32( _truncDiv( left, right ) ) )
      elif operator == '<':
         return nativeBoolToMonkey( left < right )
      elif operator == '>':
         return nativeBoolToMonkey( left > right )
      elif operator == '==':
         return nativeBoolToMonkey( left == right )
      elif operator == '!=':
         return nativeBoolToMonkey( left != right )
      else:
         return MError( f'unknown operator: INTEGER {operator} INTEGER' )

   def _evalIfExpression( self, node: IfExpression ) -> MObject:
      condition = self._mEval( node.condition )
      if isSignal( condition ):
         return condition

      if MonkeyInterpreter.isTruthy( condition ):
         return self._evalStatements( node.consequence )
      elif node.alternative is not None:
         return self._evalStatements( node.alternative )
      else:
         return M_NULL

   def _evalIndexExpression( self, collection: MObject, index: MObject ) -> MObject:
      if not isinstance( collection, MArray ):
         return MError( f'index operator not supported for {collection.typeName()}' )

      if not isinstance( index, MInteger ):
         return MError( f'index operator not supported for ARRAY[{index.typeName()}]' )

      idx = index.value
      if (idx < 0) or (idx >= len(collection.elements)):
         return M_NULL

      return collection.elements[ idx ]

   def _applyFunction( self, fn: MObject, args: List[MObject] ) -> MObject:
      if isinstance( fn, MFunction ):
         env = fn.env.openScope( )

         # Bind arguments positionally.  Extra arguments are ignored and
         # missing ones leave their parameter unbound.
         for param, argVal in zip( fn.parameters, args ):
            env.defLocal( param.name, argVal )

         savedEnv = self._env
         self._env = env
         try:
            result = self._evalStatements( fn.body )
         finally:
            self._env = savedEnv

         if isinstance( result, MReturn ):
            return result.value

         return result
      elif isinstance( fn, MBuiltin ):
         return fn( *args )
      else:
         return MError( f'not a function: {fn.typeName()}' )

   @staticmethod
   def constructBuiltins( ) -> Dict[str, MBuiltin]:
      builtinDict: Dict[str, MBuiltin] = { }

      class MDefBuiltin( object ):
         def __init__( self, builtinName: str, args: str, aliases: tuple=( ) ) -> None:
            '''Register the decorated python function as a monkey builtin under
            builtinName (and any aliases).  args documents the expected arguments.'''
            self._name:str  = builtinName
            self._usage:str = f'{builtinName}({args})'
            self._aliases:tuple = aliases

         def __call__( self, builtinDef: Callable[..., MObject] ) -> MBuiltin:
            mBuiltinObj = MBuiltin( builtinDef, self._name, self._usage )
            builtinDict[ self._name ] = mBuiltinObj
            for alias in self._aliases:
               builtinDict[ alias ] = MBuiltin( builtinDef, alias, self._usage.replace( self._name, alias, 1 ) )
            return mBuiltinObj

      def wrongNumberOfArgs( got: int, want: int ) -> MError:
         return MError( f'wrong number of arguments. got={got}, want={want}' )

      def unsupportedArg( builtinName: str, arg: MObject ) -> MError:
         return MError( f"argument to '{builtinName}' not supported, got {arg.typeName()}" )

      # ###################
      # Monkey Builtin Definitions
      # ###################
      @MDefBuiltin( 'len', '<string-or-array>' )                 # len(<string-or-array>)   ;; number of characters or elements
      def MB_len( *args ):
         if len(args) != 1:
            return wrongNumberOfArgs( len(args), 1 )

         arg = args[0]
         if isinstance( arg, MString ):
            return MInteger( len(arg.value) )
         elif isinstance( arg, MArray ):
            return MInteger( len(arg.elements) )
         else:
            return unsupportedArg( 'len', arg )

      @MDefBuiltin( 'first', '<array>' )                         # first(<array>)           ;; first element or null
      def MB_first( *args ):
         if len(args) != 1:
            return wrongNumberOfArgs( len(args), 1 )

         arg = args[0]
         if not isinstance( arg, MArray ):
            return unsupportedArg( 'first', arg )

         try:
            return arg.elements[ 0 ]
         except IndexError:
            return M_NULL

      @MDefBuiltin( 'last', '<array>' )                          # last(<array>)            ;; last element or null
      def MB_last( *args ):
         if len(args) != 1:
            return wrongNumberOfArgs( len(args), 1 )

         arg = args[0]
         if not isinstance( arg, MArray ):
            return unsupportedArg( 'last', arg )

         try:
            return arg.elements[ -1 ]
         except IndexError:
            return M_NULL

      @MDefBuiltin( 'rest', '<array>', aliases=('tail',) )       # rest(<array>)            ;; a new array without the first element
      def MB_rest( *args ):
         if len(args) != 1:
            return wrongNumberOfArgs( len(args), 1 )

         arg = args[0]
         if not isinstance( arg, MArray ):
            return unsupportedArg( 'rest', arg )

         if len(arg.elements) == 0:
            return M_NULL

         return MArray( arg.elements[ 1 : ] )

      @MDefBuiltin( 'push', '<array>, <value>' )                 # push(<array>, <value>)   ;; a new array with <value> appended
      def MB_push( *args ):
         if len(args) != 2:
            return wrongNumberOfArgs( len(args), 2 )

         theArray, value = args
         if not isinstance( theArray, MArray ):
            return unsupportedArg( 'push', theArray )

         return MArray( theArray.elements + [ value ] )

      return builtinDict
