'''
Syntax tree node types for the Monkey language.

Every node renders (via str()) to a canonical, fully parenthesized form.
Parsing the rendered text of a program yields an equal tree.
'''

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

def renderBlock( statements: List[Statement] ) -> str:
   if len(statements) == 0:
      return '{ }'

   body = ' '.join( str(stmt) for stmt in statements )
   return f'{{ {body} }}'


class Node( object ):
   pass


class Statement( Node ):
   pass


class Expression( Node ):
   pass


# ###########
# Expressions
@dataclass
class Identifier( Expression ):
   name: str

   def __str__( self ) -> str:
      return self.name


@dataclass
class IntegerLiteral( Expression ):
   value: int

   def __str__( self ) -> str:
      return str(self.value)


@dataclass
class BooleanLiteral( Expression ):
   value: bool

   def __str__( self ) -> str:
      return 'true' if self.value else 'false'


@dataclass
class StringLiteral( Expression ):
   value: str

   def __str__( self ) -> str:
      return f'"{self.value}"'


@dataclass
class PrefixExpression( Expression ):
   operator: str
   operand: Expression

   def __str__( self ) -> str:
      return f'({self.operator}{self.operand})'


@dataclass
class InfixExpression( Expression ):
   operator: str
   left: Expression
   right: Expression

   def __str__( self ) -> str:
      return f'({self.left} {self.operator} {self.right})'


@dataclass
class IfExpression( Expression ):
   condition: Expression
   consequence: List[Statement]
   alternative: Optional[List[Statement]] = None

   def __str__( self ) -> str:
      result = f'if ({self.condition}) {renderBlock(self.consequence)}'
      if self.alternative is not None:
         result += f' else {renderBlock(self.alternative)}'
      return result


@dataclass
class FunctionLiteral( Expression ):
   parameters: List[Identifier]
   body: List[Statement]

   def __str__( self ) -> str:
      paramListStr = ', '.join( str(param) for param in self.parameters )
      return f'fn ({paramListStr}) {renderBlock(self.body)}'


@dataclass
class CallExpression( Expression ):
   callee: Expression
   arguments: List[Expression]

   def __str__( self ) -> str:
      argListStr = ', '.join( str(arg) for arg in self.arguments )
      return f'{self.callee}({argListStr})'


@dataclass
class ArrayLiteral( Expression ):
   elements: List[Expression]

   def __str__( self ) -> str:
      eltListStr = ', '.join( str(elt) for elt in self.elements )
      return f'[{eltListStr}]'


@dataclass
class IndexExpression( Expression ):
   collection: Expression
   index: Expression

   def __str__( self ) -> str:
      return f'{self.collection}[{self.index}]'


# ##########
# Statements
@dataclass
class LetStatement( Statement ):
   name: Identifier
   value: Expression

   def __str__( self ) -> str:
      return f'let {self.name} = {self.value};'


@dataclass
class ReturnStatement( Statement ):
   value: Expression

   def __str__( self ) -> str:
      return f'return {self.value};'


@dataclass
class ExpressionStatement( Statement ):
   expr: Expression

   def __str__( self ) -> str:
      return f'{self.expr};'


@dataclass
class Program( Node ):
   statements: List[Statement] = field( default_factory=list )

   def __str__( self ) -> str:
      return ''.join( str(stmt) for stmt in self.statements )

   def __len__( self ) -> int:
      return len(self.statements)
