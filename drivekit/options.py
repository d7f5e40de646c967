import json
import logging
import dataclasses as dt

from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional
from dataclasses_json import DataClassJsonMixin

from . import const

_logger = logging.getLogger(__name__)


class Kind(Enum):
    """
    The syntax shape of an option's argument.
    """

    INPUT = "input"
    FLAG = "flag"
    JOINED = "joined"
    SEPARATE = "separate"
    JOINED_OR_SEPARATE = "joinedOrSeparate"
    COMMA_JOINED = "commaJoined"
    REMAINING = "remaining"

    def takesSuffix(self) -> bool:
        """Whether the argument may be glued to the spelling (e.g. `-Ifoo`)."""
        return self in (Kind.JOINED, Kind.COMMA_JOINED, Kind.JOINED_OR_SEPARATE)


class Group(Enum):
    """
    Families of options where only the last occurrence matters.
    """

    O = "O"
    G = "g"
    MODES = "modes"
    LINKER_OPTION = "linkerOption"
    INTERNAL_DEBUG = "internalDebug"


@dt.dataclass(frozen=True)
class Option:
    """
    A recognized command-line switch.
    """

    spelling: str
    """How the option is written on the command line, dashes included."""
    kind: Kind
    """Shape of the argument bound to the option."""
    alias: Optional["Option"] = None
    """The option this one is another spelling of."""
    group: Optional[Group] = None
    metaVar: Optional[str] = None
    helpText: Optional[str] = None
    hidden: bool = False

    @property
    def canonical(self) -> "Option":
        """The option an alias ultimately resolves to."""
        if self.alias is None:
            return self
        return self.alias.canonical

    def accepts(self, arg: str) -> bool:
        """Whether `arg` is a spelling of this option."""
        if self.kind == Kind.INPUT:
            return False
        if self.kind.takesSuffix():
            return arg.startswith(self.spelling)
        return arg == self.spelling

    def __str__(self) -> str:
        return self.spelling


# --- Builtin options -------------------------------------------------------- #

INPUT = Option("<input>", Kind.INPUT, helpText="Input file")
DASH_DASH = Option("--", Kind.REMAINING, helpText="Treat every following argument as an input")

HELP = Option("-help", Kind.FLAG, helpText="Display available options")
HELP_ALIAS = Option("-h", Kind.FLAG, alias=HELP)
VERSION = Option("-version", Kind.FLAG, helpText="Print version information and exit")
VERBOSE = Option("-v", Kind.FLAG, helpText="Show the parsed options and enable debug logging")

OUTPUT = Option("-o", Kind.SEPARATE, metaVar="<file>", helpText="Write output to <file>")
MODULE_NAME = Option("-module-name", Kind.SEPARATE, metaVar="<value>", helpText="Name of the module to build")
TARGET = Option("-target", Kind.SEPARATE, metaVar="<triple>", helpText="Generate code for the given target")
SDK = Option("-sdk", Kind.SEPARATE, metaVar="<sdk>", helpText="Compile against <sdk>")
WORKING_DIRECTORY = Option(
    "-working-directory",
    Kind.SEPARATE,
    metaVar="<path>",
    helpText="Resolve file paths relative to the specified directory",
)

INCLUDE = Option("-I", Kind.JOINED_OR_SEPARATE, metaVar="<directory>", helpText="Add directory to the import search path")
DEFINE = Option("-D", Kind.JOINED, metaVar="<value>", helpText="Marks a conditional compilation flag as true")
XCC = Option("-Xcc", Kind.COMMA_JOINED, metaVar="<arg>,...", helpText="Pass comma-separated arguments to the C compiler")
XLINKER = Option("-Xlinker", Kind.SEPARATE, group=Group.LINKER_OPTION, metaVar="<arg>", helpText="Pass <arg> to the linker")
LINK_LIBRARY = Option("-l", Kind.JOINED, group=Group.LINKER_OPTION, metaVar="<library>", helpText="Link against <library>")

WMO = Option("-whole-module-optimization", Kind.FLAG, helpText="Optimize the whole module at once")
WMO_ALIAS = Option("-wmo", Kind.FLAG, alias=WMO)
NO_WMO = Option("-no-whole-module-optimization", Kind.FLAG, helpText="Disable whole-module optimization")
NO_WMO_ALIAS = Option("-no-wmo", Kind.FLAG, alias=NO_WMO)
STATIC_STDLIB = Option("-static-stdlib", Kind.FLAG, helpText="Statically link the standard library")
STATIC = Option("-static", Kind.FLAG, helpText="Make this module statically linkable")
PARSE_STDLIB = Option("-parse-stdlib", Kind.FLAG, hidden=True, helpText="Parse the input file(s) as the standard library")

ONONE = Option("-Onone", Kind.FLAG, group=Group.O, helpText="Compile without any optimization")
O = Option("-O", Kind.FLAG, group=Group.O, helpText="Compile with optimizations")
OSIZE = Option("-Osize", Kind.FLAG, group=Group.O, helpText="Compile with optimizations and target small code size")

G = Option("-g", Kind.FLAG, group=Group.G, helpText="Emit debug info")
GNONE = Option("-gnone", Kind.FLAG, group=Group.G, helpText="Don't emit debug info")
GLINE_TABLES_ONLY = Option("-gline-tables-only", Kind.FLAG, group=Group.G, helpText="Emit minimal debug info for backtraces only")

EMIT_EXECUTABLE = Option("-emit-executable", Kind.FLAG, group=Group.MODES, helpText="Emit a linked executable")
EMIT_LIBRARY = Option("-emit-library", Kind.FLAG, group=Group.MODES, helpText="Emit a linked library")
EMIT_OBJECT = Option("-c", Kind.FLAG, group=Group.MODES, helpText="Emit object file(s)")
TYPECHECK = Option("-typecheck", Kind.FLAG, group=Group.MODES, helpText="Parse and type-check input file(s)")
PARSE = Option("-parse", Kind.FLAG, group=Group.MODES, helpText="Parse input file(s)")
EMIT_MODULE = Option("-emit-module", Kind.FLAG, helpText="Emit an importable module")

PRINT_JOBS = Option("-driver-print-jobs", Kind.FLAG, group=Group.INTERNAL_DEBUG, helpText="Dump list of jobs to execute")
PRINT_JOBS_ALIAS = Option("-###", Kind.FLAG, alias=PRINT_JOBS, group=Group.INTERNAL_DEBUG)
PRINT_PARSED_OPTIONS = Option(
    "-driver-print-parsed-options",
    Kind.FLAG,
    group=Group.INTERNAL_DEBUG,
    helpText="Dump the parsed command-line options",
)
PRINT_COMMAND_LINE = Option(
    "-driver-print-command-line",
    Kind.FLAG,
    group=Group.INTERNAL_DEBUG,
    helpText="Dump the raw command line, one argument per line",
)
GRAPH_OPTIONS = Option(
    "-driver-graph-options",
    Kind.FLAG,
    group=Group.INTERNAL_DEBUG,
    helpText="Print the option catalog as a graphviz graph",
)

BUILTINS: list[Option] = [
    DASH_DASH,
    HELP,
    HELP_ALIAS,
    VERSION,
    VERBOSE,
    OUTPUT,
    MODULE_NAME,
    TARGET,
    SDK,
    WORKING_DIRECTORY,
    INCLUDE,
    DEFINE,
    XCC,
    XLINKER,
    LINK_LIBRARY,
    WMO,
    WMO_ALIAS,
    NO_WMO,
    NO_WMO_ALIAS,
    STATIC_STDLIB,
    STATIC,
    PARSE_STDLIB,
    ONONE,
    O,
    OSIZE,
    G,
    GNONE,
    GLINE_TABLES_ONLY,
    EMIT_EXECUTABLE,
    EMIT_LIBRARY,
    EMIT_OBJECT,
    TYPECHECK,
    PARSE,
    EMIT_MODULE,
    PRINT_JOBS,
    PRINT_JOBS_ALIAS,
    PRINT_PARSED_OPTIONS,
    PRINT_COMMAND_LINE,
    GRAPH_OPTIONS,
]


# --- Manifest --------------------------------------------------------------- #


@dt.dataclass
class OptionSpec(DataClassJsonMixin):
    """
    An option as declared in a JSON option manifest.
    """

    spelling: str
    kind: Kind
    alias: Optional[str] = None
    """Spelling of the option this one resolves to."""
    group: Optional[Group] = None
    metaVar: Optional[str] = None
    helpText: Optional[str] = None
    hidden: bool = False


@dt.dataclass
class OptionManifest(DataClassJsonMixin):
    options: list[OptionSpec] = dt.field(default_factory=list)


def ensureSupportedManifest(manifest: Any, path: Path):
    """
    Ensure that a manifest is supported.

    Raises:
        RuntimeError: If the manifest is not supported.
    """

    if not isinstance(manifest, dict):
        raise RuntimeError(f"Manifest '{path}' should be a dictionary")

    if "$schema" not in manifest:
        raise RuntimeError(f"Missing $schema in {path}")

    if manifest["$schema"] not in const.SUPPORTED_MANIFEST:
        raise RuntimeError(
            f"Unsupported manifest schema {manifest['$schema']} in {path}"
        )


def loadManifest(path: Path) -> list[OptionSpec]:
    """
    Load the options declared in a JSON manifest.

    Args:
        path: Path to the manifest file.

    Returns:
        The declared options, in file order.
    """
    _logger.debug(f"Loading option manifest from '{path}'")
    with open(path, "r") as f:
        data = json.load(f)

    ensureSupportedManifest(data, path)
    del data["$schema"]
    return OptionManifest.from_dict(data).options


# --- Table ------------------------------------------------------------------ #


class OptionTable:
    """
    The set of options a driver recognizes, keyed by spelling.
    """

    _options: dict[str, Option]

    def __init__(self, options: Iterable[Option] = ()):
        self._options = {}
        for option in options:
            self.add(option)

    @staticmethod
    def default() -> "OptionTable":
        """Returns a fresh table holding the builtin options."""
        return OptionTable(BUILTINS)

    def add(self, option: Option):
        if option.kind == Kind.INPUT:
            raise ValueError("Input options are implicit and cannot be registered")

        if option.spelling in self._options:
            raise ValueError(f"Option '{option.spelling}' is already defined")

        self._options[option.spelling] = option

    def extend(self, specs: Iterable[OptionSpec]):
        """
        Add the options declared in a manifest.

        Aliases must name an option already in the table or declared earlier
        in `specs`.
        """
        for spec in specs:
            alias = None
            if spec.alias is not None:
                alias = self.tryLookup(spec.alias)
                if alias is None:
                    raise ValueError(
                        f"Option '{spec.spelling}' is an alias of unknown option '{spec.alias}'"
                    )

            self.add(
                Option(
                    spec.spelling,
                    spec.kind,
                    alias=alias,
                    group=spec.group,
                    metaVar=spec.metaVar,
                    helpText=spec.helpText,
                    hidden=spec.hidden,
                )
            )

    def tryLookup(self, spelling: str) -> Optional[Option]:
        return self._options.get(spelling)

    def lookup(self, spelling: str) -> Option:
        option = self.tryLookup(spelling)
        if option is None:
            raise ValueError(f"Unknown option '{spelling}'")
        return option

    def match(self, arg: str) -> Optional[Option]:
        """
        Find the option `arg` is a spelling of.

        When several options accept the argument, the one with the longest
        spelling wins, so `-Onone` is never read as `-O` followed by `none`.
        """
        best: Optional[Option] = None
        for option in self._options.values():
            if not option.accepts(arg):
                continue
            if best is None or len(option.spelling) > len(best.spelling):
                best = option
        return best

    def inGroup(self, group: Group) -> list[Option]:
        return [o for o in self._options.values() if o.group == group]

    def __iter__(self) -> Iterator[Option]:
        return iter(self._options.values())

    def __len__(self) -> int:
        return len(self._options)

    def __contains__(self, spelling: object) -> bool:
        return spelling in self._options
