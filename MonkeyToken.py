from typing import Any, Dict

# ###########
# Token Kinds
class TokenKind( object ):
   ILLEGAL_TOK        =  -1
   EOF_TOK            =   0

   IDENT_TOK          = 101    # Value Tokens
   STRING_TOK         = 102
   INT_TOK            = 111

   ASSIGN_TOK         = 301    # Operators
   PLUS_TOK           = 302
   MINUS_TOK          = 303
   ASTERISK_TOK       = 304
   SLASH_TOK          = 305
   BANG_TOK           = 306
   LT_TOK             = 311
   GT_TOK             = 312
   EQ_TOK             = 313
   NOT_EQ_TOK         = 314

   COMMA_TOK          = 401    # Delimiters
   SEMICOLON_TOK      = 402
   COLON_TOK          = 403

   OPEN_PAREN_TOK     = 411    # Paired Symbols
   CLOSE_PAREN_TOK    = 412
   OPEN_BRACE_TOK     = 413
   CLOSE_BRACE_TOK    = 414
   OPEN_BRACKET_TOK   = 415
   CLOSE_BRACKET_TOK  = 416

   FUNCTION_TOK       = 501    # Keywords
   LET_TOK            = 502
   TRUE_TOK           = 503
   FALSE_TOK          = 504
   IF_TOK             = 505
   ELSE_TOK           = 506
   RETURN_TOK         = 507


KEYWORDS: Dict[str, int] = {
   'fn':     TokenKind.FUNCTION_TOK,
   'let':    TokenKind.LET_TOK,
   'true':   TokenKind.TRUE_TOK,
   'false':  TokenKind.FALSE_TOK,
   'if':     TokenKind.IF_TOK,
   'else':   TokenKind.ELSE_TOK,
   'return': TokenKind.RETURN_TOK,
   }

# Printable names used in diagnostics.  Tokens with a payload print their
# payload along with this name.
KIND_NAMES: Dict[int, str] = {
   TokenKind.ILLEGAL_TOK:       'ILLEGAL',
   TokenKind.EOF_TOK:           'EOF',
   TokenKind.IDENT_TOK:         'IDENT',
   TokenKind.STRING_TOK:        'STRING',
   TokenKind.INT_TOK:           'INT',
   TokenKind.ASSIGN_TOK:        '=',
   TokenKind.PLUS_TOK:          '+',
   TokenKind.MINUS_TOK:         '-',
   TokenKind.ASTERISK_TOK:      '*',
   TokenKind.SLASH_TOK:         '/',
   TokenKind.BANG_TOK:          '!',
   TokenKind.LT_TOK:            '<',
   TokenKind.GT_TOK:            '>',
   TokenKind.EQ_TOK:            '==',
   TokenKind.NOT_EQ_TOK:        '!=',
   TokenKind.COMMA_TOK:         ',',
   TokenKind.SEMICOLON_TOK:     ';',
   TokenKind.COLON_TOK:         ':',
   TokenKind.OPEN_PAREN_TOK:    '(',
   TokenKind.CLOSE_PAREN_TOK:   ')',
   TokenKind.OPEN_BRACE_TOK:    '{',
   TokenKind.CLOSE_BRACE_TOK:   '}',
   TokenKind.OPEN_BRACKET_TOK:  '[',
   TokenKind.CLOSE_BRACKET_TOK: ']',
   TokenKind.FUNCTION_TOK:      'fn',
   TokenKind.LET_TOK:           'let',
   TokenKind.TRUE_TOK:          'true',
   TokenKind.FALSE_TOK:         'false',
   TokenKind.IF_TOK:            'if',
   TokenKind.ELSE_TOK:          'else',
   TokenKind.RETURN_TOK:        'return',
   }

PAYLOAD_KINDS = ( TokenKind.ILLEGAL_TOK, TokenKind.IDENT_TOK,
                  TokenKind.STRING_TOK, TokenKind.INT_TOK )


def kindName( kind: int ) -> str:
   return KIND_NAMES.get( kind, f'<token {kind}>' )


def lookupIdent( ident: str ) -> int:
   '''Return the keyword token kind for ident, or IDENT_TOK.'''
   return KEYWORDS.get( ident, TokenKind.IDENT_TOK )


class Token( object ):
   def __init__( self, kind: int, literal: str='', lineNum: int=0, colNum: int=0 ) -> None:
      self.kind: int    = kind
      self.literal: str = literal
      self.lineNum: int = lineNum
      self.colNum: int  = colNum

   def __str__( self ) -> str:
      if self.kind in PAYLOAD_KINDS:
         return f'{kindName(self.kind)}({self.literal})'
      return kindName( self.kind )

   def __repr__( self ) -> str:
      return f'Token({kindName(self.kind)!r}, {self.literal!r})'

   def __eq__( self, other: Any ) -> bool:
      # Position is not part of a token's identity.
      if not isinstance( other, Token ):
         return False
      return (self.kind == other.kind) and (self.literal == other.literal)

   def __ne__( self, other: Any ) -> bool:
      return not self.__eq__( other )
