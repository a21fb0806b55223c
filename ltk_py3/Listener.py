import ltk_py3.Parser as Parser
import sys
import datetime
import time
import traceback
from abc import ABC, abstractmethod
from typing import Any, List, Optional, TextIO, Tuple

class Interpreter( ABC ):
   '''The contract between a language runtime and the Listener.'''
   @abstractmethod
   def reboot( self ) -> None:
      '''Discard all session state and start over.'''
      pass

   @abstractmethod
   def eval( self, anExprStr: str ) -> str:
      '''Run one chunk of source text in the session and return its result
      rendered as a string.

      Raises Parser.ParseErrorList when the text does not parse.  Host level
      failures (e.g. RecursionError) escape unchanged.
      '''
      pass

   @abstractmethod
   def runtimeLibraries( self ) -> List[str]:
      '''Session files replayed silently after each reboot.'''
      pass

   @abstractmethod
   def testFileList( self ) -> List[str]:
      '''Session files replayed by "]test" when no file is named.'''
      pass

   @abstractmethod
   def symbolTableDump( self ) -> List[str]:
      '''One line per scope of the session environment, inner-most scope
      first, followed by the builtins.'''
      pass

   @abstractmethod
   def describeSymbol( self, name: str ) -> str:
      '''What name is bound to in the session.'''
      pass


class ListenerExit( Exception ):
   pass


class SessionLog( object ):
   '''A transcript file in session log format.

   A log is a sequence of entries:
      >>> first line of input
      ... further lines of input
      (any output lines)
      ==> result
   '''
   def __init__( self ) -> None:
      self._file: Optional[TextIO] = None
      self.filename: str = ''

   def isOpen( self ) -> bool:
      return self._file is not None

   def open( self, filename: str, mode: str ) -> None:
      self._file = open( filename, mode )
      self.filename = filename

   def write( self, text: str ) -> None:
      if self._file:
         self._file.write( text )

   def writeMarker( self, title: str ) -> None:
      # Markers are ordinary entries: a comment that evaluates to 0.
      self.write( f'>>> // {title}\n... 0\n\n==> 0\n\n' )

   def close( self ) -> None:
      if self._file:
         self._file.close( )
      self._file = None
      self.filename = ''


class Listener( object ):
   '''Interactive shell for an Interpreter.  Input lines are collected until
   a blank line, then evaluated.  Input starting with ']' is a listener
   command, dispatched to the do_<command> method of the same name.'''
   prompt0 = '>>> '
   prompt1 = '... '

   def __init__( self, anInterpreter: Interpreter, **keys: str ) -> None:
      self._interp = anInterpreter
      self._log = SessionLog( )
      self._exceptInfo: Any = None

      banner = f'{keys.get("language", "")} {keys.get("version", "")}'.strip()
      if keys.get( 'author' ):
         banner += f' ({keys["author"]})'
      self.writeLn( banner )
      self.do_reboot( [ ] )

   def writeLn( self, value: str='' ) -> None:
      print( value )
      self._log.write( value + '\n' )

   def prompt( self, prompt: str ) -> str:
      inputStr = input( prompt ).strip( )
      if not inputStr.startswith( ']' ):
         self._log.write( f'{prompt}{inputStr}\n' )
      return inputStr

   # ########
   # Commands
   def do_help( self, args: List[str] ) -> None:
      '''Usage: help [<command>]
      List the listener commands, or describe one of them.
      '''
      if len(args) == 0:
         names = sorted( name[3:] for name in dir(self) if name.startswith('do_') )
         print( 'Listener commands (type ]help <command> for details):' )
         print( '   ' + '  '.join( names ) )
         return

      method = getattr( self, f'do_{args[0]}', None )
      if method is None:
         print( f'No such command: {args[0]}' )
      else:
         print( method.__doc__ )

   def do_reboot( self, args: List[str] ) -> None:
      '''Usage: reboot
      Discard the session and reload the runtime libraries.
      '''
      if len(args) != 0:
         print( self.do_reboot.__doc__ )
         return

      if self._log.isOpen( ):
         print( 'Close the log before rebooting.' )
         return

      self._interp.reboot( )
      for libFileName in self._interp.runtimeLibraries( ):
         self.readAndEvalFile( libFileName )

      print( 'Session started.  Enter source text; a blank line evaluates it.' )
      print( 'Enter ]help for listener commands.' )

   def do_log( self, args: List[str] ) -> None:
      '''Usage: log <filename>
      Start recording the session to a new log file.
      '''
      if len(args) != 1:
         print( self.do_log.__doc__ )
         return

      self._startLog( args[0], 'w', 'Starting Log' )

   def do_continue( self, args: List[str] ) -> None:
      '''Usage: continue <filename> [v]
      Replay an existing log file, then keep appending the session to it.
      'v' echoes the replay.
      '''
      if len(args) not in ( 1, 2 ):
         print( self.do_continue.__doc__ )
         return

      if self.do_read( args ):
         self._startLog( args[0], 'a', 'Continuing Log' )

   def do_close( self, args: List[str] ) -> None:
      '''Usage: close
      Stop recording the session.
      '''
      if len(args) != 0:
         print( self.do_close.__doc__ )
         return

      if not self._log.isOpen( ):
         print( 'Not currently logging.' )
         return

      self._log.writeMarker( 'Logging ended.' )
      self._log.close( )

   def do_read( self, args: List[str] ) -> bool:
      '''Usage: read <filename> [v]
      Replay a log file into the session.  'v' echoes each entry.
      '''
      if len(args) not in ( 1, 2 ):
         print( self.do_read.__doc__ )
         return False

      verbose = (len(args) == 2) and (args[1].lower() == 'v')
      if not self.readAndEvalFile( args[0], verbose=verbose ):
         return False

      print( f'Log file read successfully: {args[0]}' )
      return True

   def do_test( self, args: List[str] ) -> None:
      '''Usage: test [<filename>]
      Replay a log file, checking each result against the logged one.
      With no filename, run the interpreter's own test files.
      '''
      if len(args) > 1:
         print( self.do_test.__doc__ )
         return

      filenames = args if args else self._interp.testFileList( )
      totalPassed = totalTests = 0
      for filename in filenames:
         numPassed, numTests = self.readAndTestFile( filename )
         totalPassed += numPassed
         totalTests += numTests

      print( f'{totalPassed} of {totalTests} checks passed.' )

   def do_dump( self, args: List[str] ) -> None:
      '''Usage: dump
      Print the traceback of the last host exception.
      '''
      if self._exceptInfo is None:
         print( 'Nothing to dump.' )
         return

      traceback.print_exception( *self._exceptInfo )

   def do_symbols( self, args: List[str] ) -> None:
      '''Usage: symbols [<name>]
      List the names bound in the session, inner-most scope first, or show
      what one name is bound to.
      '''
      if len(args) > 1:
         print( self.do_symbols.__doc__ )
         return

      if args:
         print( self._interp.describeSymbol( args[0] ) )
         return

      print( 'Symbol Table Dump:  Inner-Most Scope First' )
      print( '------------------------------------------' )
      for line in self._interp.symbolTableDump( ):
         print( line )

   def do_exit( self, args: List[str] ) -> None:
      '''Usage: exit
      Leave the listener.
      '''
      if self._log.isOpen( ):
         print( 'Close the log before exiting.' )
         return

      self.writeLn( 'Bye.' )
      raise ListenerExit( )

   def doCommand( self, listenerCommand: str ) -> None:
      cmd, *args = (listenerCommand[1:].split( ) or [ '' ])
      method = getattr( self, f'do_{cmd}', None ) if cmd else None
      if method is None:
         print( f'Unknown command "{listenerCommand}"' )
         return

      method( args )

   # ##########
   # Evaluation
   def evalAndPrint( self, inputExprStr: str ) -> None:
      try:
         start = time.perf_counter( )
         resultStr = self._interp.eval( inputExprStr )
         elapsed = time.perf_counter( ) - start
      except Parser.ParseErrorList as ex:
         self.writeLn( ex.generateVerboseErrorString( ) )
      except Exception as ex:
         self.writeLn( self._keepHostError( ex ) )
      else:
         self.writeLn( f'\n==> {resultStr}' )
         print( f'-------------  Total execution time:  {elapsed:15.5f} sec' )

      self.writeLn( )

   def readEvalPrintLoop( self ) -> None:
      pending: List[str] = [ ]

      while True:
         try:
            line = self.prompt( Listener.prompt1 if pending else Listener.prompt0 )
         except EOFError:
            self.writeLn( )
            self.writeLn( 'Bye.' )
            return

         if line != '':
            pending.append( line + '\n' )
            continue

         if not pending:
            continue

         source = ''.join( pending )
         pending = [ ]

         if source.startswith( ']' ):
            try:
               self.doCommand( source.strip() )
            except ListenerExit:
               return
            except Exception as ex:
               self.writeLn( self._keepHostError( ex ) )
         else:
            self.evalAndPrint( source )

   # #############
   # Session files
   def _startLog( self, filename: str, mode: str, title: str ) -> None:
      if self._log.isOpen( ):
         print( f'Already logging to {self._log.filename}.  Close it first.' )
         return

      try:
         self._log.open( filename, mode )
      except OSError:
         print( f'Unable to open log file: {filename}' )
         return

      self._log.writeMarker( f'{title} ( {datetime.datetime.now().isoformat()} ): {filename}' )

   def _readFile( self, filename: str ) -> Optional[str]:
      try:
         with open( filename, 'r' ) as file:
            return file.read( )
      except OSError:
         self.writeLn( f'Unable to read file: {filename}' )
         return None

   def readAndEvalFile( self, filename: str, verbose: bool=False ) -> bool:
      text = self._readFile( filename )
      if text is None:
         return False

      self.replaySession( text, verbose )
      return True

   def readAndTestFile( self, filename: str ) -> Tuple[int, int]:
      text = self._readFile( filename )
      if text is None:
         return 0, 0

      print( f'   Test file: {filename}... ', end='' )
      return self.testSession( text, verbose=True )

   def _evalQuietly( self, exprStr: str ) -> str:
      '''Evaluate exprStr, rendering a syntax error or host exception in
      place of a result.'''
      try:
         return self._interp.eval( exprStr )
      except Parser.ParseErrorList as ex:
         return ex.generateVerboseErrorString( )
      except Exception as ex:
         return self._keepHostError( ex )

   def _keepHostError( self, ex: Exception ) -> str:
      '''Save the traceback of ex for "]dump" and describe ex.'''
      self._exceptInfo = sys.exc_info( )
      if isinstance( ex, RecursionError ):
         return 'Maximum recursion depth exceeded.'

      return f'{type(ex).__name__}: {ex}'

   def replaySession( self, inputText: str, verbose: bool=False ) -> None:
      for exprStr, _, _ in self.parseLog( inputText ):
         resultStr = self._evalQuietly( exprStr )
         if verbose:
            firstLine, *moreLines = exprStr.splitlines( ) or [ '' ]
            print( f'\n{Listener.prompt0}{firstLine}' )
            for line in moreLines:
               print( f'{Listener.prompt1}{line}' )
            print( f'\n==> {resultStr}' )

   def testSession( self, inputText: str, verbose: bool=False ) -> Tuple[int, int]:
      '''Replay a session log, comparing each result with the logged one.
      Returns (numPassed, numTests).'''
      entries = self.parseLog( inputText )
      failures: List[str] = [ ]

      for entryNum, (exprStr, _, expected) in enumerate( entries ):
         actual = self._evalQuietly( exprStr )
         if actual != expected:
            failures.append( f'{entryNum:6}. Failed!  Returned {actual}; expected {expected}.' )

      numTests = len(entries)
      if not failures:
         print( 'ALL PASSED!' )
      else:
         print( f'({len(failures)}/{numTests}) Failed.' )
         if verbose:
            print( '\n'.join( failures ) )

      return numTests - len(failures), numTests

   @staticmethod
   def parseLog( inputText: str ) -> List[Tuple[str, str, str]]:
      '''Split a session log into (input, output, result) entries.  Text
      before the first prompt and entries with no input are dropped.'''
      stream = Parser.LineScanner( inputText )
      entries: List[Tuple[str, str, str]] = [ ]
      expr = output = result = ''
      section = None      # which part of an entry the next plain line belongs to

      def flush( ) -> None:
         if expr != '':
            entries.append( (expr, output.rstrip(), result.rstrip()) )

      try:
         while True:
            line = stream.peekLine( )
            stream.consumeLine( )

            if line.startswith( Listener.prompt0 ):
               flush( )
               expr, output, result = line[4:], '', ''
               section = 'expr'
            elif line.startswith( Listener.prompt1 ) and section == 'expr':
               expr += line[4:]
            elif line.startswith( '==> ' ) and section in ( 'expr', 'output' ):
               result = line[4:]
               section = 'result'
            elif section == 'result':
               if line.strip() == '':
                  section = None
               else:
                  result += line
            elif section in ( 'expr', 'output' ):
               output += line
               section = 'output'
      except StopIteration:
         flush( )

      return entries
