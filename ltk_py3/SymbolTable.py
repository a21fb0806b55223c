from __future__ import annotations

from typing import Any, Dict, List, Optional

class SymbolTable( object ):
   '''One lexical scope: a name table plus a link to the enclosing scope.
   The parent link is fixed when the scope is created.  A scope is shared
   by every closure created in it, so defLocal() is visible to all of them.'''

   def __init__( self, parent: Optional[SymbolTable]=None, **initialBindings: Any ) -> None:
      self._parent: Optional[SymbolTable] = parent
      self._names: Dict[str, Any] = dict( initialBindings )

   def defLocal( self, name: str, value: Any ) -> Any:
      '''Bind name in this scope, replacing any binding already here.'''
      self._names[ name ] = value
      return value

   def getValue( self, name: str ) -> Any:
      '''The value bound to name in the innermost scope defining it, or
      None if no scope in the chain does.'''
      scope = self._scopeDefining( name )
      return scope._names[ name ] if scope is not None else None

   def isDefined( self, name: str ) -> bool:
      return self._scopeDefining( name ) is not None

   def localSymbols( self ) -> List[str]:
      return sorted( self._names )

   def parentEnv( self ) -> Optional[SymbolTable]:
      return self._parent

   def openScope( self ) -> SymbolTable:
      '''A new, empty scope enclosed by this one.'''
      return SymbolTable( self )

   def _scopeDefining( self, name: str ) -> Optional[SymbolTable]:
      scope: Optional[SymbolTable] = self
      while scope is not None:
         if name in scope._names:
            return scope
         scope = scope._parent
      return None
