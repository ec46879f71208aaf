from rich import print
from rich.pretty import pprint

from flagset import *
from flagset.usage import stylize

flags = FlagSet("util", "utility", description="Utility that does stuff", shell=True)
flags.add_bool("verbose", "v", "Print extra debugging information", False)
flags.add_switch("help", "h", "Help")
flags.add_int("line", "l", "Start counting at `line_number`", 1)
flags.add_string("output", "o", "Output `directory`", "/var/log/output")
flags.add_float("skew", "s", "Skew `percentage`", 2.33)


if __name__ == '__main__':
    arguments = invoke(flags)
    if flags.get_switch("help"):
        print(stylize(flags.usage()))
    else:
        pprint(flags)
        pprint(arguments)
