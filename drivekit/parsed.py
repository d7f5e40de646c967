import dataclasses as dt

from typing import Callable, Iterator, Optional

from . import shell
from .options import Group, Kind, Option, INPUT

# --- Argument --------------------------------------------------------------- #


@dt.dataclass(frozen=True)
class Argument:
    """
    The value bound to one option occurrence.

    The variant is implied by the option's kind, so callers normally know
    which accessor to use. `asSingle` and `asMultiple` treat a mismatch as a
    broken invariant; `trySingle` and `tryMultiple` return `None` instead.
    """

    def trySingle(self) -> Optional[str]:
        if isinstance(self, SingleArgument):
            return self.value
        return None

    def tryMultiple(self) -> Optional[list[str]]:
        if isinstance(self, MultipleArgument):
            return list(self.values)
        return None

    @property
    def asSingle(self) -> str:
        assert isinstance(self, SingleArgument), "not a single argument"
        return self.value

    @property
    def asMultiple(self) -> list[str]:
        assert isinstance(self, MultipleArgument), "not a multiple argument"
        return list(self.values)


@dt.dataclass(frozen=True)
class NoArgument(Argument):
    pass


@dt.dataclass(frozen=True)
class SingleArgument(Argument):
    value: str


@dt.dataclass(frozen=True)
class MultipleArgument(Argument):
    values: tuple[str, ...]

    def __init__(self, values: list[str] | tuple[str, ...]):
        object.__setattr__(self, "values", tuple(values))


# --- Parsed Option ---------------------------------------------------------- #


@dt.dataclass(frozen=True)
class ParsedOption:
    """
    A single parsed option with its argument.
    """

    option: Option
    argument: Argument = dt.field(default_factory=NoArgument)

    @property
    def description(self) -> str:
        """Human readable form, with arguments shell-escaped."""
        spelling = self.option.spelling
        match self.option.kind:
            case Kind.INPUT:
                return shell.escape(self.argument.asSingle)
            case Kind.FLAG:
                return spelling
            case Kind.JOINED:
                return shell.escape(spelling + self.argument.asSingle)
            case Kind.COMMA_JOINED:
                return shell.escape(spelling + ",".join(self.argument.asMultiple))
            case Kind.JOINED_OR_SEPARATE | Kind.SEPARATE:
                return spelling + " " + shell.escape(self.argument.asSingle)
            case Kind.REMAINING:
                args = self.argument.asMultiple
                if len(args) == 0:
                    return spelling
                return spelling + " " + " ".join(shell.escape(a) for a in args)
            case _:
                raise AssertionError(f"Unhandled option kind {self.option.kind}")

    @property
    def tokens(self) -> list[str]:
        """Raw command-line arguments reproducing this option."""
        spelling = self.option.spelling
        match self.option.kind:
            case Kind.INPUT:
                return [self.argument.asSingle]
            case Kind.FLAG:
                return [spelling]
            case Kind.JOINED:
                return [spelling + self.argument.asSingle]
            case Kind.COMMA_JOINED:
                return [spelling + ",".join(self.argument.asMultiple)]
            case Kind.JOINED_OR_SEPARATE | Kind.SEPARATE:
                return [spelling, self.argument.asSingle]
            case Kind.REMAINING:
                return [spelling] + self.argument.asMultiple
            case _:
                raise AssertionError(f"Unhandled option kind {self.option.kind}")

    def __str__(self) -> str:
        return self.description


# --- Parsed Options --------------------------------------------------------- #

Predicate = Callable[[ParsedOption], bool]


@dt.dataclass
class _Entry:
    parsed: ParsedOption
    consumed: bool = False


class ParsedOptions:
    """
    The options parsed from one command line, in order of appearance.

    Every record carries a "consumed" mark. Queries that find a record mark
    it, so once the driver is done, the records still unmarked are exactly the
    command-line input nothing acted upon.

    Records are only ever appended; an index keeps naming the same record for
    the lifetime of the store.
    """

    _entries: list[_Entry]

    def __init__(self):
        self._entries = []

    def addOption(self, option: Option, argument: Argument = NoArgument()):
        self._entries.append(_Entry(ParsedOption(option, argument)))

    def addInput(self, input: str):
        self.addOption(INPUT, SingleArgument(input))

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ParsedOption]:
        return (e.parsed for e in self._entries)

    def __getitem__(self, index: int) -> ParsedOption:
        return self._entries[index].parsed

    def __str__(self) -> str:
        return self.description

    def __repr__(self) -> str:
        return f"ParsedOptions({self.commandLine!r})"

    # --- Consumption -------------------------------------------------------- #

    def isConsumed(self, index: int) -> bool:
        return self._entries[index].consumed

    def unconsumed(self) -> list[ParsedOption]:
        """The records no query has acted upon, in order."""
        return [e.parsed for e in self._entries if not e.consumed]

    # --- Queries ------------------------------------------------------------ #

    def peek(self, where: Predicate) -> list[ParsedOption]:
        """Like `filter`, without marking anything consumed."""
        return [e.parsed for e in self._entries if where(e.parsed)]

    def peekLast(self, where: Predicate) -> Optional[ParsedOption]:
        """Like `last`, without marking anything consumed."""
        index = self._lastIndex(where)
        if index is None:
            return None
        return self._entries[index].parsed

    def filter(self, where: Predicate) -> list[ParsedOption]:
        """
        Return all options that match the predicate, in order.

        Every match is marked consumed.
        """
        result: list[ParsedOption] = []
        for entry in self._entries:
            if where(entry.parsed):
                entry.consumed = True
                result.append(entry.parsed)
        return result

    def last(self, where: Predicate) -> Optional[ParsedOption]:
        """
        Return the last option that matches the predicate.

        Every match is marked consumed, not only the returned one: earlier
        occurrences were overridden, which still counts as acting on them.
        """
        matches = self.filter(where)
        if len(matches) == 0:
            return None
        return matches[-1]

    def contains(self, option: Option) -> bool:
        assert option.alias is None, "Don't check for aliased options"
        return self.last(lambda parsed: parsed.option.canonical == option) is not None

    def containsInGroup(self, group: Group) -> bool:
        return self.getLastInGroup(group) is not None

    @property
    def hasAnyInput(self) -> bool:
        """
        Whether any input was given.

        This does not consume anything: later stages still need to see the
        inputs.
        """
        return any(e.parsed.option.kind == Kind.INPUT for e in self._entries)

    def forEachModifying(self, body: Callable[[ParsedOption], ParsedOption]):
        """
        Replace every record with `body(record)`, in order.

        Rewriting a record is not acting on it, so consumption is left as is.
        """
        for entry in self._entries:
            entry.parsed = body(entry.parsed)

    def allInputs(self) -> list[str]:
        return [
            parsed.argument.asSingle
            for parsed in self.filter(lambda p: p.option.kind == Kind.INPUT)
        ]

    def hasArgument(self, *options: Option) -> bool:
        return (
            self.last(
                lambda parsed: parsed.option in options
                or parsed.option.canonical in options
            )
            is not None
        )

    def hasFlag(self, positive: Option, negative: Option, default: bool) -> bool:
        """
        Resolve a flag and its negation.

        Returns `default` when neither is present, otherwise whichever
        appears last wins. Nothing is consumed; callers that act on the
        result consume the pair with `hasArgument(positive, negative)`.
        """
        positiveIndex = self._lastIndex(lambda p: p.option.canonical == positive)
        negativeIndex = self._lastIndex(lambda p: p.option.canonical == negative)

        if positiveIndex is None and negativeIndex is None:
            return default

        if positiveIndex is None:
            return False

        if negativeIndex is None:
            return True

        return positiveIndex > negativeIndex

    def getLastArgument(self, option: Option) -> Optional[Argument]:
        assert option.alias is None, "Don't check for aliased options"
        parsed = self.last(lambda p: p.option.canonical == option)
        if parsed is None:
            return None
        return parsed.argument

    def getLastInGroup(self, group: Group) -> Optional[ParsedOption]:
        return self.last(lambda parsed: parsed.option.group == group)

    def _lastIndex(self, where: Predicate) -> Optional[int]:
        for index in range(len(self._entries) - 1, -1, -1):
            if where(self._entries[index].parsed):
                return index
        return None

    # --- Rendering ---------------------------------------------------------- #

    @property
    def description(self) -> str:
        """All options, human readable, separated by spaces."""
        return " ".join(e.parsed.description for e in self._entries)

    @property
    def commandLine(self) -> list[str]:
        """Raw command-line arguments reproducing these options."""
        result: list[str] = []
        for entry in self._entries:
            result.extend(entry.parsed.tokens)
        return result
