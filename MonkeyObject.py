from __future__ import annotations

from ltk_py3.SymbolTable import SymbolTable
from MonkeyAST import Identifier, Statement, renderBlock

from typing import Any, Callable, List

# ###################
# Monkey Object Types
INTEGER_OBJ  = 'INTEGER'
BOOLEAN_OBJ  = 'BOOLEAN'
STRING_OBJ   = 'STRING'
ARRAY_OBJ    = 'ARRAY'
NULL_OBJ     = 'NULL'
FUNCTION_OBJ = 'FUNCTION'
BUILTIN_OBJ  = 'BUILTIN'
RETURN_OBJ   = 'RETURN_VALUE'
ERROR_OBJ    = 'ERROR'

# ###################
# Monkey Function API
def prettyPrintMonkeyObj( monkeyObj: MObject ) -> str:
   '''Return a printable, formatted python string representation
   of a monkey object.'''
   if isinstance(monkeyObj, MString):
      return f'"{monkeyObj.value}"'
   else:
      return monkeyObj.inspect( )

# #################################
# Monkey Runtime Object Definitions
class MObject( object ):
   TYPE: str = ''

   def typeName( self ) -> str:
      return self.TYPE

   def inspect( self ) -> str:
      raise NotImplementedError( )

   def __str__( self ) -> str:
      return self.inspect( )

   def __repr__( self ) -> str:
      return self.inspect( )


class MInteger( MObject ):
   TYPE = INTEGER_OBJ

   def __init__( self, value: int ) -> None:
      self.value: int = value

   def inspect( self ) -> str:
      return str(self.value)

   def __eq__( self, other: Any ) -> bool:
      return isinstance(other, MInteger) and (self.value == other.value)


class MBoolean( MObject ):
   TYPE = BOOLEAN_OBJ

   def __init__( self, value: bool ) -> None:
      self.value: bool = value

   def inspect( self ) -> str:
      return 'true' if self.value else 'false'

   def __eq__( self, other: Any ) -> bool:
      return isinstance(other, MBoolean) and (self.value == other.value)


class MString( MObject ):
   TYPE = STRING_OBJ

   def __init__( self, value: str ) -> None:
      self.value: str = value

   def inspect( self ) -> str:
      return self.value

   def __eq__( self, other: Any ) -> bool:
      return isinstance(other, MString) and (self.value == other.value)


class MArray( MObject ):
   TYPE = ARRAY_OBJ

   def __init__( self, elements: List[MObject] ) -> None:
      self.elements: List[MObject] = elements

   def __len__( self ) -> int:
      return len(self.elements)

   def inspect( self ) -> str:
      eltListStr = ', '.join( prettyPrintMonkeyObj(elt) for elt in self.elements )
      return f'[{eltListStr}]'

   def __eq__( self, other: Any ) -> bool:
      if not isinstance( other, MArray ):
         return False

      if len(self) != len(other):
         return False

      for subSelf, subOther in zip( self.elements, other.elements ):
         if subSelf != subOther:
            return False

      return True


class MNull( MObject ):
   TYPE = NULL_OBJ

   def inspect( self ) -> str:
      return 'null'

   def __eq__( self, other: Any ) -> bool:
      return isinstance(other, MNull)


class MFunction( MObject ):
   '''A closure.  env is the environment the function literal was evaluated
   in; it is shared, not copied, so later bindings in it are visible.'''
   TYPE = FUNCTION_OBJ

   def __init__( self, parameters: List[Identifier], body: List[Statement], env: SymbolTable ) -> None:
      self.parameters: List[Identifier] = parameters
      self.body: List[Statement]        = body
      self.env: SymbolTable             = env

   def inspect( self ) -> str:
      paramListStr = ', '.join( param.name for param in self.parameters )
      return f'fn({paramListStr}) {{ ... }}'

   def source( self ) -> str:
      paramListStr = ', '.join( param.name for param in self.parameters )
      return f'fn ({paramListStr}) {renderBlock(self.body)}'

   def __eq__( self, other: Any ) -> bool:
      # The captured environment may contain this very function.
      if not isinstance( other, MFunction ):
         return False
      return (self.parameters == other.parameters) and (self.body == other.body)


class MBuiltin( MObject ):
   TYPE = BUILTIN_OBJ

   def __init__( self, fn: Callable[..., MObject], name: str, usage: str ) -> None:
      self._fn: Callable[..., MObject] = fn
      self.name: str  = name
      self.usage: str = usage

   def __call__( self, *args: MObject ) -> MObject:
      return self._fn( *args )

   def inspect( self ) -> str:
      return f'builtin function {self.name}'

   def __eq__( self, other: Any ) -> bool:
      return isinstance(other, MBuiltin) and (self.name == other.name)


class MReturn( MObject ):
   '''Signal carrying the value of a return statement up to the nearest
   function application (or the top level).'''
   TYPE = RETURN_OBJ

   def __init__( self, value: MObject ) -> None:
      self.value: MObject = value

   def inspect( self ) -> str:
      return f'return {self.value.inspect()}'

   def __eq__( self, other: Any ) -> bool:
      return isinstance(other, MReturn) and (self.value == other.value)


class MError( MObject ):
   TYPE = ERROR_OBJ

   def __init__( self, message: str ) -> None:
      self.message: str = message

   def inspect( self ) -> str:
      return f'ERROR: {self.message}'

   def __eq__( self, other: Any ) -> bool:
      return isinstance(other, MError) and (self.message == other.message)


M_TRUE  = MBoolean( True )
M_FALSE = MBoolean( False )
M_NULL  = MNull( )

def nativeBoolToMonkey( value: bool ) -> MBoolean:
   return M_TRUE if value else M_FALSE

def isSignal( monkeyObj: MObject ) -> bool:
   '''True for the values that abandon the enclosing computation: an error,
   or the return signal of a return statement.'''
   return isinstance( monkeyObj, (MError, MReturn) )
