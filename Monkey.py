import argparse
import sys
from typing import List, Optional

import ltk_py3.Listener as Listener
import ltk_py3.Parser as Parser
from MonkeyInterpreter import MonkeyInterpreter

VERSION = '0.1.0'

def runScript( filename: str ) -> int:
   '''Evaluate a file of Monkey source and print its result.  Returns the
   process exit status: 1 for a syntax error or an ERROR result.'''
   with open( filename, 'r' ) as file:
      source = file.read( )

   try:
      resultStr = MonkeyInterpreter( ).eval( source )
   except Parser.ParseErrorList as ex:
      print( ex.generateVerboseErrorString( ), file=sys.stderr )
      return 1

   print( resultStr )
   return 1 if resultStr.startswith( 'ERROR: ' ) else 0

def main( argv: Optional[List[str]]=None ) -> int:
   argParser = argparse.ArgumentParser( description='The Monkey language listener.' )
   argParser.add_argument( 'script', nargs='?', help='run this source file instead of starting the listener' )
   args = argParser.parse_args( argv )

   if args.script:
      return runScript( args.script )

   interp = MonkeyInterpreter( )
   theListener = Listener.Listener( interp, language='Monkey',
                                            version=VERSION,
                                            author='Monkey contributors')
   theListener.readEvalPrintLoop( )
   return 0

if __name__ == '__main__':
   sys.exit( main( ) )
