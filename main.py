from rich.pretty import pprint

from argscript import *

__prog__ = "demo"

SCRIPT = r"""#!/usr/bin/env bash
# @describe A demo cli
# @version 1.0.0

# @cmd Build the project
# with every target enabled
# @alias b, make
# @option -t --target*[=debug|release] <TARGET> Build target
# @flag -v --verbose* Print more
# @arg files+ <FILE> Files to build
build () { :; }
"""


if __name__ == '__main__':
    pprint(parse(SCRIPT, shell=True, fancy=True))
