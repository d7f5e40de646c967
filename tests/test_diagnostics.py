from drivekit import diagnostics, options
from drivekit.diagnostics import Severity


def test_messages_are_data():
    msg = diagnostics.error_unknown_target("z80-unknown-cpm")
    assert msg.id == "error_unknown_target"
    assert msg.severity == Severity.ERROR
    assert msg.isError
    assert str(msg) == "error: unknown target 'z80-unknown-cpm'"


def test_warning():
    msg = diagnostics.warning_no_such_sdk("/sdk")
    assert msg.severity == Severity.WARNING
    assert not msg.isError
    assert msg.text == "no such SDK: /sdk"


def test_option_messages_use_spelling():
    assert (
        diagnostics.error_invalid_arg_value(options.TARGET, "x").text
        == "invalid value 'x' in '-target'"
    )
    assert (
        diagnostics.error_option_missing_required_argument(options.EMIT_MODULE, options.MODULE_NAME).text
        == "option '-emit-module' is missing a required argument (-module-name)"
    )


def test_combination_messages():
    assert (
        diagnostics.error_argument_not_allowed_with("-static", "-emit-executable").text
        == "argument '-static' is not allowed with '-emit-executable'"
    )
    assert (
        diagnostics.error_static_emit_executable_disallowed().text
        == "-static may not be used with -emit-executable"
    )
    assert (
        diagnostics.error_mode_cannot_emit_module().text
        == "this mode does not support emitting modules"
    )
    assert (
        diagnostics.error_unsupported_opt_for_target("-static-stdlib", "arm64-apple-macosx").text
        == "unsupported option '-static-stdlib' for target 'arm64-apple-macosx'"
    )


def test_module_name_suffix():
    implicit = diagnostics.error_bad_module_name("a-b", explicitModuleName=False)
    assert implicit.text == 'module name "a-b" is not a valid identifier; use -module-name flag to specify an alternate name'

    explicit = diagnostics.error_stdlib_module_name("Core", explicitModuleName=True)
    assert explicit.text == 'module name "Core" is reserved for the standard library'


def test_emit(capsys):
    diagnostics.warning_unused_option("-g").emit()
    diagnostics.error_unknown_option("-x").emit()
    err = capsys.readouterr().err
    assert "argument unused during compilation: '-g'" in err
    assert "unknown argument: '-x'" in err


def test_no_input_files():
    assert str(diagnostics.error_no_input_files()) == "error: no input files"
