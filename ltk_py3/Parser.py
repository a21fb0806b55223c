from abc import ABC, abstractmethod
from typing import Any, List

class ScannerBuffer( object ):
   '''Character level cursor over a source string.

   point is the next unread character.  mark is where the lexeme being
   scanned began, so the lexeme is always source[mark:point].'''
   def __init__( self ) -> None:
      self._source: str = ''
      self._point: int  = 0
      self._mark: int   = 0

   def reset( self, sourceString: str ) -> None:
      self._source = sourceString
      self._point  = 0
      self._mark   = 0

   def peek( self ) -> str:
      '''The character at point, or '' once the source is used up.'''
      return self._charAt( self._point )

   def peekAhead( self ) -> str:
      '''The character just after point, or ''.'''
      return self._charAt( self._point + 1 )

   def consume( self ) -> None:
      if self._point < len(self._source):
         self._point += 1

   def consumePast( self, aCharSet: str ) -> None:
      '''Advance point while the character there is in aCharSet.'''
      while self.peek() != '' and self.peek() in aCharSet:
         self.consume( )

   def consumeUpTo( self, aCharSet: str ) -> None:
      '''Advance point until the character there is in aCharSet (or eof).'''
      while self.peek() != '' and self.peek() not in aCharSet:
         self.consume( )

   def markStartOfLexeme( self ) -> None:
      self._mark = self._point

   def getLexeme( self ) -> str:
      return self._source[ self._mark : self._point ]

   def markLineNum( self ) -> int:
      '''1-based line number of mark.'''
      return self._source.count( '\n', 0, self._mark ) + 1

   def markColNum( self ) -> int:
      '''1-based column number of mark.'''
      lineStart = self._source.rfind( '\n', 0, self._mark ) + 1
      return self._mark - lineStart + 1

   def lineText( self, lineNum: int ) -> str:
      '''Text of the 1-based line lineNum without its line break; '' if
      there is no such line.'''
      lines = self._source.splitlines( )
      if 1 <= lineNum <= len(lines):
         return lines[ lineNum - 1 ]
      return ''

   def _charAt( self, index: int ) -> str:
      if index < len(self._source):
         return self._source[ index ]
      return ''


class Scanner( ABC ):
   '''Token level cursor.  A subclass supplies _scanNextToken(), which
   advances the buffer past one token and returns its kind.  The scanner
   always holds one token of lookahead.'''
   def __init__( self ) -> None:
      self.buffer: ScannerBuffer = ScannerBuffer( )
      self._tok: int = -1

   def reset( self, sourceString: str ) -> None:
      self.buffer.reset( sourceString )
      self._tok = -1
      self.consume( )

   def peekToken( self ) -> int:
      '''Kind of the lookahead token.'''
      return self._tok

   def consume( self ) -> None:
      self._tok = self._scanNextToken( )

   def getLexeme( self ) -> str:
      '''Text of the lookahead token.  Only valid until the next consume().'''
      return self.buffer.getLexeme( )

   @abstractmethod
   def _scanNextToken( self ) -> int:
      pass


class LineScanner( object ):
   '''Line level cursor over a block of text.  Lines keep their endings.'''
   def __init__( self, inputText: str ) -> None:
      self._lines: List[str] = inputText.splitlines( keepends=True )
      self._point: int = 0

   def peekLine( self ) -> str:
      '''The current line.  Raises StopIteration past the last line.'''
      if self._point >= len(self._lines):
         raise StopIteration( )
      return self._lines[ self._point ]

   def consumeLine( self ) -> None:
      self._point += 1


class ParseError( Exception ):
   '''One syntax diagnostic, with the position and text of the offending
   line.  Parsers collect these rather than raise them, so that parsing can
   continue past a malformed statement.'''
   def __init__( self, aScanner: Scanner, errorMessage: str, lineNum: int, colNum: int, filename: str='' ) -> None:
      super().__init__( errorMessage )
      self.errorMsg: str   = errorMessage
      self.lineNum: int    = lineNum
      self.colNum: int     = colNum
      self.filename: str   = filename
      self.sourceLine: str = aScanner.buffer.lineText( lineNum )

   def __str__( self ) -> str:
      return self.errorMsg

   def generateVerboseErrorString( self ) -> str:
      '''Three lines: the location, the source line and a caret under the
      offending column followed by the message.'''
      caretIndent = ' ' * max( self.colNum - 1, 0 )
      return ( f'Syntax Error: {self.filename}({self.lineNum},{self.colNum})\n'
               f'{self.sourceLine}\n'
               f'{caretIndent}^ {self.errorMsg}' )


class ParseErrorList( Exception ):
   '''Raised by an interpreter that refuses to evaluate a program because its
   parse produced diagnostics.'''
   def __init__( self, errors: List[ParseError] ) -> None:
      super().__init__( '\n'.join( str(err) for err in errors ) )
      self.errors: List[ParseError] = list(errors)

   def generateVerboseErrorString( self ) -> str:
      return '\n'.join( err.generateVerboseErrorString() for err in self.errors )


class Parser( ABC ):
   @abstractmethod
   def parse( self, inputString: str ) -> Any:
      '''Return the syntax tree of inputString.'''
      pass
