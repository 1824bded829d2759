from rich.pretty import pprint

from argscribe import *


@command(
    examples=["{command_name} build --release", "{command_name} run -v input.txt"],
    error_codes={1: "invalid arguments", 2: "build failed"},
)
def cargo(
        cmd=SubCommand(Commands(dynamic=lambda: [("fmt", "format sources (plugin)")])),
        /,
        *,
        quiet=Switch("-q", descr="do not print progress"),
):
    """a tiny build tool"""


@cargo.command
def build(*, release=Switch(descr="build with optimizations")):
    """compile the current package"""


@cargo.command
def run(
        file=Positional(descr="the input file"),
        /,
        *,
        verbose=Switch("-v", optionality=Optionality.REPEATING, descr="talk more, repeat for even more"),
):
    """run the current package"""


if __name__ == '__main__':
    pprint(cargo)
    cargo.print_help()
    run.print_help(json=True)
