import os
import logging
import dataclasses as dt

from pathlib import Path
from typing import Optional

from . import const, diagnostics, graph, options, parser, shell, vt100
from .options import Group, OptionTable
from .parsed import MultipleArgument, ParsedOption, ParsedOptions, SingleArgument
from .targets import Triple

_logger = logging.getLogger(__name__)


class Driver:
    """
    Resolves a command line into a compilation plan.

    All the queries happen while the driver is constructed; whatever is left
    unconsumed afterwards is reported as unused.
    """

    table: OptionTable
    parsed: ParsedOptions
    diagnostics: list[diagnostics.Message]

    mode: options.Option
    inputs: list[str]
    outputPath: Optional[str]
    moduleName: str
    target: Triple
    sdkPath: Optional[str]
    wholeModule: bool
    optimization: Optional[options.Option]
    debugInfo: Optional[options.Option]
    clangArgs: list[str]
    linkerArgs: list[str]
    includePaths: list[str]
    defines: list[str]

    def __init__(
        self,
        args: list[str],
        table: Optional[OptionTable] = None,
        env: Optional[dict[str, str]] = None,
    ):
        self.table = table or OptionTable.default()
        self.env = dict(os.environ) if env is None else env
        self.parsed = parser.parse(args, self.table)
        self.diagnostics = []

        _logger.debug(f"Parsed options: {self.parsed}")

        self.showHelp = self.parsed.contains(options.HELP)
        self.showVersion = self.parsed.contains(options.VERSION)
        self.verbose = self.parsed.contains(options.VERBOSE)
        self.printJobs = self.parsed.contains(options.PRINT_JOBS)
        self.printParsedOptions = self.parsed.contains(options.PRINT_PARSED_OPTIONS)
        self.printCommandLine = self.parsed.contains(options.PRINT_COMMAND_LINE)
        self.graphOptions = self.parsed.contains(options.GRAPH_OPTIONS)

        self._applyWorkingDirectory()

        mode = self.parsed.getLastInGroup(Group.MODES)
        self.mode = mode.option.canonical if mode else options.EMIT_EXECUTABLE

        self.inputs = self._computeInputs()
        self.outputPath = self._lastSingle(options.OUTPUT)
        self.emitModule = self.parsed.contains(options.EMIT_MODULE)
        self.moduleName = self._computeModuleName()
        self.target = self._computeTarget()
        self.sdkPath = self._computeSdk()
        self.wholeModule = self._resolveFlag(options.WMO, options.NO_WMO, False)

        self.optimization = self._lastInGroup(Group.O)
        self.debugInfo = self._lastInGroup(Group.G)

        self.clangArgs = [
            arg
            for parsed in self.parsed.filter(lambda p: p.option.canonical == options.XCC)
            for arg in parsed.argument.asMultiple
            if arg
        ]
        self.linkerArgs = self._linkerArgs()
        self.includePaths = self._allSingle(options.INCLUDE)
        self.defines = self._allSingle(options.DEFINE)

        self.static = self.parsed.contains(options.STATIC)

        informational = self.showHelp or self.showVersion or self.verbose or self.graphOptions
        if not self._hasAnyInput() and not informational:
            self.diagnostics.append(diagnostics.error_no_input_files())

        for parsed in self.parsed.unconsumed():
            self.diagnostics.append(diagnostics.warning_unused_option(parsed.description))

    # --- Helpers ------------------------------------------------------------ #

    def _lastSingle(self, option: options.Option) -> Optional[str]:
        argument = self.parsed.getLastArgument(option)
        if argument is None:
            return None
        return argument.asSingle

    def _allSingle(self, option: options.Option) -> list[str]:
        return [
            parsed.argument.asSingle
            for parsed in self.parsed.filter(lambda p: p.option.canonical == option)
        ]

    def _lastInGroup(self, group: Group) -> Optional[options.Option]:
        parsed = self.parsed.getLastInGroup(group)
        if parsed is None:
            return None
        return parsed.option.canonical

    def _resolveFlag(self, positive: options.Option, negative: options.Option, default: bool) -> bool:
        result = self.parsed.hasFlag(positive, negative, default)
        # The flag pair has been acted upon.
        self.parsed.hasArgument(positive, negative)
        return result

    # --- Resolution --------------------------------------------------------- #

    def _applyWorkingDirectory(self):
        workingDirectory = self._lastSingle(options.WORKING_DIRECTORY)
        if workingDirectory is None:
            return

        _logger.debug(f"Resolving paths relative to '{workingDirectory}'")

        def resolvePath(path: str) -> str:
            if path == "-" or os.path.isabs(path):
                return path
            return os.path.join(workingDirectory, path)

        def resolve(parsed: ParsedOption) -> ParsedOption:
            if parsed.option.canonical == options.DASH_DASH:
                paths = [resolvePath(path) for path in parsed.argument.asMultiple]
                return dt.replace(parsed, argument=MultipleArgument(paths))
            if parsed.option.kind == options.Kind.INPUT or parsed.option.canonical == options.OUTPUT:
                return dt.replace(parsed, argument=SingleArgument(resolvePath(parsed.argument.asSingle)))
            return parsed

        self.parsed.forEachModifying(resolve)

    def _hasAnyInput(self) -> bool:
        if self.parsed.hasAnyInput:
            return True
        remaining = self.parsed.peekLast(lambda p: p.option.canonical == options.DASH_DASH)
        return remaining is not None and len(remaining.argument.asMultiple) > 0

    def _computeInputs(self) -> list[str]:
        inputs = self.parsed.allInputs()
        remaining = self.parsed.getLastArgument(options.DASH_DASH)
        if remaining is not None:
            inputs += remaining.asMultiple
        return inputs

    def _computeModuleName(self) -> str:
        explicit = self._lastSingle(options.MODULE_NAME)
        parseStdlib = self.parsed.contains(options.PARSE_STDLIB)

        if explicit is not None:
            name = explicit
        elif self.outputPath is not None and self.outputPath != "-":
            name = Path(self.outputPath).stem
        elif len(self.inputs) == 1 and self.inputs[0] != "-":
            name = Path(self.inputs[0]).stem
        else:
            name = const.DEFAULT_MODULE_NAME

        if not name.isidentifier():
            if explicit is not None or self.emitModule or self.mode == options.EMIT_LIBRARY:
                self.diagnostics.append(
                    diagnostics.error_bad_module_name(name, explicit is not None)
                )
            else:
                _logger.debug(f"'{name}' is not a valid module name, using '{const.DEFAULT_MODULE_NAME}'")
                name = const.DEFAULT_MODULE_NAME

        if name == const.STDLIB_MODULE_NAME and not parseStdlib:
            self.diagnostics.append(
                diagnostics.error_stdlib_module_name(name, explicit is not None)
            )

        return name

    def _computeTarget(self) -> Triple:
        spelled = self._lastSingle(options.TARGET)
        target: Optional[Triple] = None

        if spelled is not None:
            target = Triple.parse(spelled)
            if target is None:
                self.diagnostics.append(diagnostics.error_unknown_target(spelled))

        if target is None:
            target = Triple.host()

        if self.parsed.contains(options.STATIC_STDLIB) and target.isDarwin:
            self.diagnostics.append(
                diagnostics.error_unsupported_opt_for_target(
                    options.STATIC_STDLIB.spelling, target.triple
                )
            )

        return target

    def _computeSdk(self) -> Optional[str]:
        sdk = self._lastSingle(options.SDK)
        if sdk is None:
            sdk = self.env.get(const.SDKROOT_ENV) or None

        if sdk is not None and not shell.isdir(sdk):
            self.diagnostics.append(diagnostics.warning_no_such_sdk(sdk))

        return sdk

    def _linkerArgs(self) -> list[str]:
        result: list[str] = []
        for parsed in self.parsed.filter(lambda p: p.option.group == Group.LINKER_OPTION):
            if parsed.option.canonical == options.LINK_LIBRARY:
                result.append(f"-l{parsed.argument.asSingle}")
            else:
                result.append(parsed.argument.asSingle)
        return result

    # --- Output ------------------------------------------------------------- #

    @property
    def hasErrors(self) -> bool:
        return any(d.isError for d in self.diagnostics)

    def frontendJob(self) -> list[str]:
        """The frontend invocation implementing this plan."""
        job = [const.FRONTEND, "-frontend", self.mode.spelling]
        job += self.inputs
        job += ["-module-name", self.moduleName, "-target", self.target.triple]

        if self.sdkPath is not None:
            job += ["-sdk", self.sdkPath]
        if self.optimization is not None:
            job.append(self.optimization.spelling)
        if self.debugInfo is not None:
            job.append(self.debugInfo.spelling)
        if self.wholeModule:
            job.append(options.WMO.spelling)
        if self.emitModule:
            job.append(options.EMIT_MODULE.spelling)
        if self.static:
            job.append(options.STATIC.spelling)
        for path in self.includePaths:
            job += ["-I", path]
        for define in self.defines:
            job.append(f"-D{define}")
        for arg in self.clangArgs:
            job += ["-Xcc", arg]
        for arg in self.linkerArgs:
            job += ["-Xlinker", arg]
        if self.outputPath is not None:
            job += ["-o", self.outputPath]

        return job

    def help(self):
        vt100.title(const.ARGV0)
        print()

        vt100.subtitle("Usage")
        print(vt100.indent(f"{const.ARGV0} [options] <inputs>"))
        print()

        vt100.subtitle("Description")
        print(vt100.indent(const.DESCRIPTION))
        print()

        vt100.subtitle("Options")
        for option in sorted(self.table, key=lambda o: o.spelling):
            if option.hidden or option.alias is not None:
                continue
            flag = option.spelling
            if option.metaVar:
                flag += f" {option.metaVar}"
            if option.helpText:
                flag += f" {vt100.BRIGHT_BLACK}{option.helpText}{vt100.RESET}"
            print(vt100.indent(flag))
        print()

    def run(self) -> int:
        for diagnostic in self.diagnostics:
            diagnostic.emit()

        if self.hasErrors:
            return 1

        if self.showHelp:
            self.help()
            return 0

        if self.showVersion or self.verbose:
            print(f"{const.ARGV0} version {const.VERSION_STR}")
            print(f"Target: {self.target}")
            if self.showVersion:
                return 0

        if self.verbose:
            print(self.parsed.description)

        if self.printParsedOptions:
            print(self.parsed.description)

        if self.printCommandLine:
            for arg in self.parsed.commandLine:
                print(arg)

        if self.graphOptions:
            print(graph.options(self.table, self.parsed).source)

        if self.printJobs or self.verbose:
            print(shell.join(self.frontendJob()))

        return 0
