import ltk_py3.Parser as Parser
from MonkeyToken import Token, TokenKind, kindName, lookupIdent
from MonkeyAST import ( Program, Statement, Expression, Identifier, IntegerLiteral,
                        BooleanLiteral, StringLiteral, PrefixExpression, InfixExpression,
                        IfExpression, FunctionLiteral, CallExpression, ArrayLiteral,
                        IndexExpression, LetStatement, ReturnStatement, ExpressionStatement )
from typing import Callable, Dict, List, Optional

"""
The Language
------------
Lexemes
   Whitespace:  ' ', '\t', '\r', '\n'  (ignored)

   Comments
      Comments extend from '//' through the end of the line.

   Delimiters:
      ',', ';', ':', '(', ')', '{', '}', '[', ']'

   Operators:
      '=', '+', '-', '*', '/', '!', '<', '>', '==', '!='

   Literals
      IntegerLiteral:  ('0' .. '9')+
      StringLiteral:   '"' (^('"'))* '"'
      Identifier:      ('a..zA..Z_')+

   Keywords
      'fn', 'let', 'true', 'false', 'if', 'else', 'return'

Grammar
   Program:
      Statement* EOF

   Statement:
      'let' Identifier '=' Expression [';']
      | 'return' Expression [';']
      | Expression [';']

   Block:
      '{' Statement* '}'

   Expression:
      Identifier | IntegerLiteral | StringLiteral | 'true' | 'false'
      | ('!' | '-') Expression
      | Expression ('+' | '-' | '*' | '/' | '<' | '>' | '==' | '!=') Expression
      | '(' Expression ')'
      | 'if' '(' Expression ')' Block [ 'else' Block ]
      | 'fn' '(' [ Identifier { ',' Identifier } ] ')' Block
      | Expression '(' [ Expression { ',' Expression } ] ')'
      | '[' [ Expression { ',' Expression } ] ']'
      | Expression '[' Expression ']'

Operator Precedence (lowest to highest)
   ==  !=
   <   >
   +   -
   *   /
   unary ! -
   call (...)
   index [...]
"""

class MonkeyScanner( Parser.Scanner ):
   WHITESPACE     = ' \t\n\r'
   DIGIT          = '0123456789'
   ALPHA_LOWER    = 'abcdefghijklmnopqrstuvwxyz'
   ALPHA_UPPER    = 'ABCDEFGHIJKLMNOPQRSTUVWXYZ'
   IDENT_CHARS    = ALPHA_LOWER + ALPHA_UPPER + '_'

   SINGLE_CHAR_TOKENS: Dict[str, int] = {
      '+': TokenKind.PLUS_TOK,
      '-': TokenKind.MINUS_TOK,
      '*': TokenKind.ASTERISK_TOK,
      '/': TokenKind.SLASH_TOK,
      '<': TokenKind.LT_TOK,
      '>': TokenKind.GT_TOK,
      ',': TokenKind.COMMA_TOK,
      ';': TokenKind.SEMICOLON_TOK,
      ':': TokenKind.COLON_TOK,
      '(': TokenKind.OPEN_PAREN_TOK,
      ')': TokenKind.CLOSE_PAREN_TOK,
      '{': TokenKind.OPEN_BRACE_TOK,
      '}': TokenKind.CLOSE_BRACE_TOK,
      '[': TokenKind.OPEN_BRACKET_TOK,
      ']': TokenKind.CLOSE_BRACKET_TOK,
      }

   def __init__( self ) -> None:
      super( ).__init__( )

   def nextToken( self ) -> Token:
      '''Consume and return the next token.  Once the input is exhausted
      this returns an EOF token on every call.'''
      kind = self.peekToken( )
      lex  = self.getLexeme( )
      buf  = self.buffer

      if kind == TokenKind.STRING_TOK:
         literal = lex[1:-1] if (len(lex) > 1 and lex.endswith('"')) else lex[1:]
      else:
         literal = lex

      token = Token( kind, literal, buf.markLineNum(), buf.markColNum() )
      self.consume( )
      return token

   def tokenize( self, aString: str ) -> List[Token]:
      tokenList = [ ]

      self.reset( aString )

      while self.peekToken() != TokenKind.EOF_TOK:
         tokenList.append( self.nextToken( ) )

      tokenList.append( self.nextToken( ) )

      return tokenList

   def _scanNextToken( self ) -> int:
      buf = self.buffer

      self._skipWhitespaceAndComments( )
      buf.markStartOfLexeme( )

      nextChar = buf.peek( )
      if nextChar == '':
         return TokenKind.EOF_TOK
      elif nextChar == '=':
         buf.consume( )
         if buf.peek( ) == '=':
            buf.consume( )
            return TokenKind.EQ_TOK
         return TokenKind.ASSIGN_TOK
      elif nextChar == '!':
         buf.consume( )
         if buf.peek( ) == '=':
            buf.consume( )
            return TokenKind.NOT_EQ_TOK
         return TokenKind.BANG_TOK
      elif nextChar in MonkeyScanner.SINGLE_CHAR_TOKENS:
         buf.consume( )
         return MonkeyScanner.SINGLE_CHAR_TOKENS[ nextChar ]
      elif nextChar == '"':
         return self._scanStringLiteral( )
      elif nextChar in MonkeyScanner.DIGIT:
         buf.consumePast( MonkeyScanner.DIGIT )
         return TokenKind.INT_TOK
      elif nextChar in MonkeyScanner.IDENT_CHARS:
         buf.consumePast( MonkeyScanner.IDENT_CHARS )
         return lookupIdent( buf.getLexeme( ) )
      else:
         buf.consume( )
         return TokenKind.ILLEGAL_TOK

   def _scanStringLiteral( self ) -> int:
      buf = self.buffer

      buf.consume( )                # opening quote
      buf.consumeUpTo( '"' )
      buf.consume( )                # closing quote (no-op at eof)

      return TokenKind.STRING_TOK

   def _skipWhitespaceAndComments( self ) -> None:
      buf = self.buffer

      while True:
         buf.consumePast( MonkeyScanner.WHITESPACE )

         if (buf.peek() == '/') and (buf.peekAhead() == '/'):
            buf.consumeUpTo( '\n\r' )
         else:
            return


# ###########
# Precedences
LOWEST      = 1
EQUALS      = 2    # == !=
LESSGREATER = 3    # < >
SUM         = 4    # + -
PRODUCT     = 5    # * /
PREFIX      = 6    # -x !x
CALL        = 7    # fn(x)
INDEX       = 8    # array[i]

PRECEDENCES: Dict[int, int] = {
   TokenKind.EQ_TOK:            EQUALS,
   TokenKind.NOT_EQ_TOK:        EQUALS,
   TokenKind.LT_TOK:            LESSGREATER,
   TokenKind.GT_TOK:            LESSGREATER,
   TokenKind.PLUS_TOK:          SUM,
   TokenKind.MINUS_TOK:         SUM,
   TokenKind.ASTERISK_TOK:      PRODUCT,
   TokenKind.SLASH_TOK:         PRODUCT,
   TokenKind.OPEN_PAREN_TOK:    CALL,
   TokenKind.OPEN_BRACKET_TOK:  INDEX,
   }

INT32_MAX = 2**31 - 1


class MonkeyParser( Parser.Parser ):
   def __init__( self ) -> None:
      self._scanner: MonkeyScanner = MonkeyScanner( )
      self._curToken: Token  = Token( TokenKind.EOF_TOK )
      self._peekToken: Token = Token( TokenKind.EOF_TOK )
      self._diagnostics: List[Parser.ParseError] = [ ]

      self._prefixParseFns: Dict[int, Callable[[], Optional[Expression]]] = {
         TokenKind.IDENT_TOK:         self._parseIdentifier,
         TokenKind.INT_TOK:           self._parseIntegerLiteral,
         TokenKind.STRING_TOK:        self._parseStringLiteral,
         TokenKind.TRUE_TOK:          self._parseBooleanLiteral,
         TokenKind.FALSE_TOK:         self._parseBooleanLiteral,
         TokenKind.BANG_TOK:          self._parsePrefixExpression,
         TokenKind.MINUS_TOK:         self._parsePrefixExpression,
         TokenKind.OPEN_PAREN_TOK:    self._parseGroupedExpression,
         TokenKind.IF_TOK:            self._parseIfExpression,
         TokenKind.FUNCTION_TOK:      self._parseFunctionLiteral,
         TokenKind.OPEN_BRACKET_TOK:  self._parseArrayLiteral,
         }

      self._infixParseFns: Dict[int, Callable[[Expression], Optional[Expression]]] = {
         TokenKind.EQ_TOK:            self._parseInfixExpression,
         TokenKind.NOT_EQ_TOK:        self._parseInfixExpression,
         TokenKind.LT_TOK:            self._parseInfixExpression,
         TokenKind.GT_TOK:            self._parseInfixExpression,
         TokenKind.PLUS_TOK:          self._parseInfixExpression,
         TokenKind.MINUS_TOK:         self._parseInfixExpression,
         TokenKind.ASTERISK_TOK:      self._parseInfixExpression,
         TokenKind.SLASH_TOK:         self._parseInfixExpression,
         TokenKind.OPEN_PAREN_TOK:    self._parseCallExpression,
         TokenKind.OPEN_BRACKET_TOK:  self._parseIndexExpression,
         }

   def parse( self, inputString: str ) -> Program:  # Returns an AST of inputString
      self.reset( inputString )
      return self.parseProgram( )

   def reset( self, inputString: str ) -> None:
      '''Point the parser at a new source string and clear the diagnostics.'''
      self._scanner.reset( inputString )
      self._diagnostics = [ ]

      # Prime the current and lookahead tokens
      self._peekToken = self._scanner.nextToken( )
      self._nextToken( )

   def parseProgram( self ) -> Program:
      program = Program( )

      while not self._curTokenIs( TokenKind.EOF_TOK ):
         stmt = self._parseStatement( )
         if stmt is not None:
            program.statements.append( stmt )
         self._nextToken( )

      return program

   def errors( self ) -> List[str]:
      '''The diagnostic messages from the most recent parse, in the order
      encountered.  Callers must check this before trusting the Program.'''
      return [ diag.errorMsg for diag in self._diagnostics ]

   def diagnostics( self ) -> List[Parser.ParseError]:
      return list(self._diagnostics)

   # ##########
   # Statements
   def _parseStatement( self ) -> Optional[Statement]:
      if self._curTokenIs( TokenKind.LET_TOK ):
         return self._parseLetStatement( )
      elif self._curTokenIs( TokenKind.RETURN_TOK ):
         return self._parseReturnStatement( )
      else:
         return self._parseExpressionStatement( )

   def _parseLetStatement( self ) -> Optional[LetStatement]:
      if not self._expectPeek( TokenKind.IDENT_TOK ):
         return None

      name = Identifier( self._curToken.literal )

      if not self._expectPeek( TokenKind.ASSIGN_TOK ):
         return None

      self._nextToken( )

      value = self._parseExpression( LOWEST )
      if value is None:
         self._skipToSemicolon( )
         return None

      if self._peekTokenIs( TokenKind.SEMICOLON_TOK ):
         self._nextToken( )

      return LetStatement( name, value )

   def _parseReturnStatement( self ) -> Optional[ReturnStatement]:
      self._nextToken( )

      value = self._parseExpression( LOWEST )
      if value is None:
         self._skipToSemicolon( )
         return None

      if self._peekTokenIs( TokenKind.SEMICOLON_TOK ):
         self._nextToken( )

      return ReturnStatement( value )

   def _parseExpressionStatement( self ) -> Optional[ExpressionStatement]:
      expr = self._parseExpression( LOWEST )

      if self._peekTokenIs( TokenKind.SEMICOLON_TOK ):
         self._nextToken( )

      if expr is None:
         return None

      return ExpressionStatement( expr )

   def _parseBlockStatement( self ) -> List[Statement]:
      block: List[Statement] = [ ]

      self._nextToken( )

      while not self._curTokenIs( TokenKind.CLOSE_BRACE_TOK ) and not self._curTokenIs( TokenKind.EOF_TOK ):
         stmt = self._parseStatement( )
         if stmt is not None:
            block.append( stmt )
         self._nextToken( )

      return block

   # ###########
   # Expressions
   def _parseExpression( self, precedence: int ) -> Optional[Expression]:
      prefix = self._prefixParseFns.get( self._curToken.kind )
      if prefix is None:
         self._noPrefixParseFnError( self._curToken )
         return None

      leftExpr = prefix( )

      while (leftExpr is not None) and not self._peekTokenIs( TokenKind.SEMICOLON_TOK ) \
            and (precedence < self._peekPrecedence( )):
         infix = self._infixParseFns.get( self._peekToken.kind )
         if infix is None:
            return leftExpr

         self._nextToken( )
         leftExpr = infix( leftExpr )

      return leftExpr

   def _parseIdentifier( self ) -> Expression:
      return Identifier( self._curToken.literal )

   def _parseIntegerLiteral( self ) -> Optional[Expression]:
      lex = self._curToken.literal
      value = int(lex)
      if value > INT32_MAX:
         self._addError( f'could not parse {lex} as integer', self._curToken )
         return None

      return IntegerLiteral( value )

   def _parseStringLiteral( self ) -> Expression:
      return StringLiteral( self._curToken.literal )

   def _parseBooleanLiteral( self ) -> Expression:
      return BooleanLiteral( self._curTokenIs( TokenKind.TRUE_TOK ) )

   def _parsePrefixExpression( self ) -> Optional[Expression]:
      operator = self._curToken.literal
      self._nextToken( )

      operand = self._parseExpression( PREFIX )
      if operand is None:
         return None

      return PrefixExpression( operator, operand )

   def _parseInfixExpression( self, left: Expression ) -> Optional[Expression]:
      operator = self._curToken.literal
      precedence = self._curPrecedence( )
      self._nextToken( )

      right = self._parseExpression( precedence )
      if right is None:
         return None

      return InfixExpression( operator, left, right )

   def _parseGroupedExpression( self ) -> Optional[Expression]:
      self._nextToken( )

      expr = self._parseExpression( LOWEST )
      if expr is None:
         return None

      if not self._expectPeek( TokenKind.CLOSE_PAREN_TOK ):
         return None

      return expr

   def _parseIfExpression( self ) -> Optional[Expression]:
      if not self._expectPeek( TokenKind.OPEN_PAREN_TOK ):
         return None

      self._nextToken( )
      condition = self._parseExpression( LOWEST )
      if condition is None:
         return None

      if not self._expectPeek( TokenKind.CLOSE_PAREN_TOK ):
         return None

      if not self._expectPeek( TokenKind.OPEN_BRACE_TOK ):
         return None

      consequence = self._parseBlockStatement( )

      alternative: Optional[List[Statement]] = None
      if self._peekTokenIs( TokenKind.ELSE_TOK ):
         self._nextToken( )

         if not self._expectPeek( TokenKind.OPEN_BRACE_TOK ):
            return None

         alternative = self._parseBlockStatement( )

      return IfExpression( condition, consequence, alternative )

   def _parseFunctionLiteral( self ) -> Optional[Expression]:
      if not self._expectPeek( TokenKind.OPEN_PAREN_TOK ):
         return None

      parameters = self._parseFunctionParameters( )
      if parameters is None:
         return None

      if not self._expectPeek( TokenKind.OPEN_BRACE_TOK ):
         return None

      body = self._parseBlockStatement( )

      return FunctionLiteral( parameters, body )

   def _parseFunctionParameters( self ) -> Optional[List[Identifier]]:
      parameters: List[Identifier] = [ ]

      if self._peekTokenIs( TokenKind.CLOSE_PAREN_TOK ):
         self._nextToken( )
         return parameters

      if not self._expectPeek( TokenKind.IDENT_TOK ):
         return None
      parameters.append( Identifier( self._curToken.literal ) )

      while self._peekTokenIs( TokenKind.COMMA_TOK ):
         self._nextToken( )
         if not self._expectPeek( TokenKind.IDENT_TOK ):
            return None
         parameters.append( Identifier( self._curToken.literal ) )

      if not self._expectPeek( TokenKind.CLOSE_PAREN_TOK ):
         return None

      return parameters

   def _parseCallExpression( self, callee: Expression ) -> Optional[Expression]:
      arguments = self._parseExpressionList( TokenKind.CLOSE_PAREN_TOK )
      if arguments is None:
         return None

      return CallExpression( callee, arguments )

   def _parseArrayLiteral( self ) -> Optional[Expression]:
      elements = self._parseExpressionList( TokenKind.CLOSE_BRACKET_TOK )
      if elements is None:
         return None

      return ArrayLiteral( elements )

   def _parseIndexExpression( self, collection: Expression ) -> Optional[Expression]:
      self._nextToken( )

      index = self._parseExpression( LOWEST )
      if index is None:
         return None

      if not self._expectPeek( TokenKind.CLOSE_BRACKET_TOK ):
         return None

      return IndexExpression( collection, index )

   def _parseExpressionList( self, endKind: int ) -> Optional[List[Expression]]:
      '''Parse a comma separated list of expressions terminated by endKind.
      The current token is the list's opening delimiter.'''
      exprList: List[Expression] = [ ]

      if self._peekTokenIs( endKind ):
         self._nextToken( )
         return exprList

      self._nextToken( )
      expr = self._parseExpression( LOWEST )
      if expr is None:
         return None
      exprList.append( expr )

      while self._peekTokenIs( TokenKind.COMMA_TOK ):
         self._nextToken( )
         self._nextToken( )
         expr = self._parseExpression( LOWEST )
         if expr is None:
            return None
         exprList.append( expr )

      if not self._expectPeek( endKind ):
         return None

      return exprList

   # #######
   # Helpers
   def _nextToken( self ) -> None:
      self._curToken = self._peekToken
      self._peekToken = self._scanner.nextToken( )

   def _curTokenIs( self, kind: int ) -> bool:
      return self._curToken.kind == kind

   def _peekTokenIs( self, kind: int ) -> bool:
      return self._peekToken.kind == kind

   def _expectPeek( self, kind: int ) -> bool:
      '''Advance if the lookahead token is of the expected kind.  Otherwise
      record a diagnostic and resynchronize at the next semicolon.'''
      if self._peekTokenIs( kind ):
         self._nextToken( )
         return True

      self._peekError( kind )
      self._skipToSemicolon( )
      return False

   def _skipToSemicolon( self ) -> None:
      while not self._curTokenIs( TokenKind.SEMICOLON_TOK ) and not self._curTokenIs( TokenKind.EOF_TOK ):
         self._nextToken( )

   def _peekPrecedence( self ) -> int:
      return PRECEDENCES.get( self._peekToken.kind, LOWEST )

   def _curPrecedence( self ) -> int:
      return PRECEDENCES.get( self._curToken.kind, LOWEST )

   def _peekError( self, kind: int ) -> None:
      self._addError( f'expected next token to be {kindName(kind)}, got {self._peekToken} instead', self._peekToken )

   def _noPrefixParseFnError( self, token: Token ) -> None:
      self._addError( f'no prefix parse function for {token} found', token )

   def _addError( self, errorMessage: str, token: Token ) -> None:
      diag = Parser.ParseError( self._scanner, errorMessage, token.lineNum, token.colNum )
      self._diagnostics.append( diag )
