import logging
import dataclasses as dt

from enum import Enum

from . import vt100
from .options import Option

_logger = logging.getLogger(__name__)


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dt.dataclass(frozen=True)
class Message:
    """
    A user-facing diagnostic.

    Messages are plain data: building one reports nothing. Whoever decides
    the input is at fault calls `emit`.
    """

    id: str
    """Stable identifier of the diagnostic, e.g. `error_unknown_target`."""
    severity: Severity
    text: str

    @property
    def isError(self) -> bool:
        return self.severity == Severity.ERROR

    def emit(self) -> None:
        if self.isError:
            _logger.error(f"{self.id}: {self.text}")
            vt100.error(self.text)
        else:
            _logger.warning(f"{self.id}: {self.text}")
            vt100.warning(self.text)

    def __str__(self) -> str:
        return f"{self.severity.value}: {self.text}"


def _error(id: str, text: str) -> Message:
    return Message(id, Severity.ERROR, text)


def _warning(id: str, text: str) -> Message:
    return Message(id, Severity.WARNING, text)


def _moduleNameSuffix(explicitModuleName: bool) -> str:
    if explicitModuleName:
        return ""
    return "; use -module-name flag to specify an alternate name"


def error_static_emit_executable_disallowed() -> Message:
    return _error(
        "error_static_emit_executable_disallowed",
        "-static may not be used with -emit-executable",
    )


def error_option_missing_required_argument(option: Option, requiredArg: Option) -> Message:
    return _error(
        "error_option_missing_required_argument",
        f"option '{option.spelling}' is missing a required argument ({requiredArg.spelling})",
    )


def error_invalid_arg_value(arg: Option, value: str) -> Message:
    return _error(
        "error_invalid_arg_value",
        f"invalid value '{value}' in '{arg.spelling}'",
    )


def error_argument_not_allowed_with(arg: str, other: str) -> Message:
    return _error(
        "error_argument_not_allowed_with",
        f"argument '{arg}' is not allowed with '{other}'",
    )


def error_unsupported_opt_for_target(arg: str, target: str) -> Message:
    return _error(
        "error_unsupported_opt_for_target",
        f"unsupported option '{arg}' for target '{target}'",
    )


def error_mode_cannot_emit_module() -> Message:
    return _error(
        "error_mode_cannot_emit_module",
        "this mode does not support emitting modules",
    )


def error_bad_module_name(moduleName: str, explicitModuleName: bool) -> Message:
    return _error(
        "error_bad_module_name",
        f'module name "{moduleName}" is not a valid identifier{_moduleNameSuffix(explicitModuleName)}',
    )


def error_stdlib_module_name(moduleName: str, explicitModuleName: bool) -> Message:
    return _error(
        "error_stdlib_module_name",
        f'module name "{moduleName}" is reserved for the standard library{_moduleNameSuffix(explicitModuleName)}',
    )


def warning_no_such_sdk(path: str) -> Message:
    return _warning("warning_no_such_sdk", f"no such SDK: {path}")


def error_unknown_target(target: str) -> Message:
    return _error("error_unknown_target", f"unknown target '{target}'")


def error_unknown_option(arg: str) -> Message:
    return _error("error_unknown_option", f"unknown argument: '{arg}'")


def error_missing_arg_value(option: Option) -> Message:
    return _error(
        "error_missing_arg_value",
        f"missing argument value for '{option.spelling}'",
    )


def warning_unused_option(arg: str) -> Message:
    return _warning(
        "warning_unused_option",
        f"argument unused during compilation: '{arg}'",
    )


def error_no_input_files() -> Message:
    return _error("error_no_input_files", "no input files")
