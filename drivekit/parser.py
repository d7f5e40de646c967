import logging

from typing import Optional

from . import diagnostics
from .options import Kind, OptionTable
from .parsed import MultipleArgument, NoArgument, ParsedOptions, SingleArgument

_logger = logging.getLogger(__name__)


class OptionParseError(ValueError):
    """
    The command line could not be tokenized.
    """

    message: diagnostics.Message

    def __init__(self, message: diagnostics.Message):
        super().__init__(message.text)
        self.message = message


def _isInput(arg: str) -> bool:
    return arg == "-" or not arg.startswith("-")


def parse(args: list[str], table: Optional[OptionTable] = None) -> ParsedOptions:
    """
    Parses a list of command-line arguments into parsed options.

    Args:
        args: The raw arguments, without the program name.
        table: The options to recognize, the builtin ones by default.

    Raises:
        OptionParseError: On an unknown option or a missing argument value.
    """
    if table is None:
        table = OptionTable.default()

    result = ParsedOptions()
    stack = args[:]
    while len(stack) > 0:
        arg = stack.pop(0)

        if _isInput(arg):
            result.addInput(arg)
            continue

        option = table.match(arg)
        if option is None:
            raise OptionParseError(diagnostics.error_unknown_option(arg))

        _logger.debug(f"Matched '{arg}' as {option.spelling} ({option.kind.value})")

        rest = arg[len(option.spelling) :]
        match option.kind:
            case Kind.FLAG:
                result.addOption(option, NoArgument())
            case Kind.JOINED:
                result.addOption(option, SingleArgument(rest))
            case Kind.COMMA_JOINED:
                result.addOption(option, MultipleArgument(rest.split(",")))
            case Kind.JOINED_OR_SEPARATE if rest:
                result.addOption(option, SingleArgument(rest))
            case Kind.JOINED_OR_SEPARATE | Kind.SEPARATE:
                if len(stack) == 0:
                    raise OptionParseError(diagnostics.error_missing_arg_value(option))
                result.addOption(option, SingleArgument(stack.pop(0)))
            case Kind.REMAINING:
                result.addOption(option, MultipleArgument(stack))
                stack = []
            case _:
                raise AssertionError(f"Unexpected option kind {option.kind}")

    return result
