import os

from drivekit import const, options
from drivekit.driver import Driver
from drivekit.options import Kind, Option, OptionTable

LINUX = ["-target", "x86_64-unknown-linux-gnu"]


def makeDriver(*args: str, env: dict[str, str] | None = None) -> Driver:
    return Driver(list(args), env=env or {})


def ids(driver: Driver) -> list[str]:
    return [d.id for d in driver.diagnostics]


def test_defaults():
    d = makeDriver("main.src", *LINUX)
    assert d.inputs == ["main.src"]
    assert d.mode == options.EMIT_EXECUTABLE
    assert d.moduleName == "main"
    assert d.outputPath is None
    assert d.wholeModule is False
    assert d.optimization is None
    assert d.debugInfo is None
    assert d.diagnostics == []


def test_module_name_sources():
    assert makeDriver("app.src", *LINUX).moduleName == "app"
    assert makeDriver("a.src", "b.src", *LINUX).moduleName == "main"
    assert makeDriver("a.src", "-o", "build/tool", *LINUX).moduleName == "tool"
    assert makeDriver("a.src", "-module-name", "Lib", "-o", "x", *LINUX).moduleName == "Lib"


def test_bad_explicit_module_name():
    d = makeDriver("a.src", "-module-name", "not valid", *LINUX)
    assert ids(d) == ["error_bad_module_name"]
    assert d.hasErrors
    assert "use -module-name" not in d.diagnostics[0].text


def test_bad_derived_module_name_falls_back():
    d = makeDriver("my-file.src", *LINUX)
    assert d.moduleName == "main"
    assert d.diagnostics == []


def test_bad_derived_module_name_when_emitting_module():
    d = makeDriver("my-file.src", "-emit-library", *LINUX)
    assert ids(d) == ["error_bad_module_name"]
    assert "use -module-name" in d.diagnostics[0].text


def test_stdlib_module_name():
    d = makeDriver("a.src", "-module-name", const.STDLIB_MODULE_NAME, *LINUX)
    assert ids(d) == ["error_stdlib_module_name"]

    d = makeDriver("a.src", "-module-name", const.STDLIB_MODULE_NAME, "-parse-stdlib", *LINUX)
    assert d.diagnostics == []


def test_target():
    d = makeDriver("a.src", "-target", "arm64-apple-macosx14.0")
    assert d.target.triple == "arm64-apple-macosx14.0"
    assert d.target.isDarwin


def test_unknown_target_falls_back_to_host():
    d = makeDriver("a.src", "-target", "z80-unknown-cpm")
    assert ids(d) == ["error_unknown_target"]
    assert d.target is not None


def test_static_stdlib_unsupported_on_darwin():
    d = makeDriver("a.src", "-static-stdlib", "-target", "arm64-apple-macosx")
    assert ids(d) == ["error_unsupported_opt_for_target"]

    d = makeDriver("a.src", "-static-stdlib", *LINUX)
    assert d.diagnostics == []


def test_missing_sdk(tmp_path):
    d = makeDriver("a.src", "-sdk", str(tmp_path / "nope"), *LINUX)
    assert ids(d) == ["warning_no_such_sdk"]
    assert not d.hasErrors

    d = makeDriver("a.src", "-sdk", str(tmp_path), *LINUX)
    assert d.sdkPath == str(tmp_path)
    assert d.diagnostics == []


def test_sdk_from_environment(tmp_path):
    d = makeDriver("a.src", *LINUX, env={const.SDKROOT_ENV: str(tmp_path)})
    assert d.sdkPath == str(tmp_path)


def test_whole_module_last_wins():
    assert makeDriver("a.src", "-wmo", *LINUX).wholeModule is True
    assert makeDriver("a.src", "-wmo", "-no-wmo", *LINUX).wholeModule is False
    assert makeDriver("a.src", "-no-whole-module-optimization", "-wmo", *LINUX).wholeModule is True


def test_whole_module_flags_are_not_reported_unused():
    d = makeDriver("a.src", "-wmo", "-no-wmo", *LINUX)
    assert d.diagnostics == []


def test_groups_last_wins():
    d = makeDriver("a.src", "-O", "-g", "-Onone", "-gnone", *LINUX)
    assert d.optimization == options.ONONE
    assert d.debugInfo == options.GNONE
    assert d.diagnostics == []


def test_mode():
    assert makeDriver("a.src", "-c", "-typecheck", *LINUX).mode == options.TYPECHECK


def test_passthrough():
    d = makeDriver(
        "a.src",
        "-Xcc-DX,-DY",
        "-Xcc-Iinc",
        "-Xlinker",
        "-rpath",
        "-lm",
        "-Iinclude",
        "-DDEBUG",
        *LINUX,
    )
    assert d.clangArgs == ["-DX", "-DY", "-Iinc"]
    assert d.linkerArgs == ["-rpath", "-lm"]
    assert d.includePaths == ["include"]
    assert d.defines == ["DEBUG"]
    assert d.diagnostics == []


def test_remaining_arguments_are_inputs():
    d = makeDriver(*LINUX, "a.src", "--", "-b.src")
    assert d.inputs == ["a.src", "-b.src"]


def test_working_directory():
    d = makeDriver("a.src", "/abs/b.src", "-o", "out", "-working-directory", "/work", *LINUX)
    assert d.inputs == [os.path.join("/work", "a.src"), "/abs/b.src"]
    assert d.outputPath == os.path.join("/work", "out")
    assert d.parsed.commandLine[0] == os.path.join("/work", "a.src")

    d = makeDriver("-working-directory", "/work", *LINUX, "a.src", "--", "b.src", "/abs/c.src", "-")
    assert d.inputs == [os.path.join("/work", "a.src"), os.path.join("/work", "b.src"), "/abs/c.src", "-"]


def test_unused_options_are_reported():
    table = OptionTable.default()
    table.add(Option("-enable-testing", Kind.FLAG))

    d = Driver(["a.src", "-enable-testing", *LINUX], table, env={})
    assert ids(d) == ["warning_unused_option"]
    assert "-enable-testing" in d.diagnostics[0].text
    assert [p.option.spelling for p in d.parsed.unconsumed()] == ["-enable-testing"]


def test_frontend_job():
    d = makeDriver(
        "a.src",
        "-module-name",
        "App",
        "-O",
        "-wmo",
        "-Xcc-DX",
        "-o",
        "app",
        *LINUX,
    )
    assert d.frontendJob() == [
        const.FRONTEND,
        "-frontend",
        "-emit-executable",
        "a.src",
        "-module-name",
        "App",
        "-target",
        "x86_64-unknown-linux-gnu",
        "-O",
        "-whole-module-optimization",
        "-Xcc",
        "-DX",
        "-o",
        "app",
    ]


def test_run_prints_jobs(capsys):
    d = makeDriver("a.src", "-###", *LINUX)
    assert d.run() == 0
    out = capsys.readouterr().out
    assert out.startswith(const.FRONTEND + " -frontend")


def test_run_prints_command_line(capsys):
    d = makeDriver("a b.src", "-o", "out", "-driver-print-command-line", *LINUX)
    assert d.run() == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[:3] == ["a b.src", "-o", "out"]


def test_run_prints_parsed_options(capsys):
    d = makeDriver("a b.src", "-driver-print-parsed-options", *LINUX)
    assert d.run() == 0
    assert capsys.readouterr().out.strip() == "'a b.src' -driver-print-parsed-options -target x86_64-unknown-linux-gnu"


def test_run_fails_on_errors(capsys):
    d = makeDriver("a.src", "-target", "bogus")
    assert d.run() == 1
    assert "unknown target 'bogus'" in capsys.readouterr().err


def test_run_help(capsys):
    d = makeDriver("-h")
    assert d.run() == 0
    out = capsys.readouterr().out
    assert "-module-name <value>" in out
    assert "-parse-stdlib" not in out


def test_no_input_files():
    assert ids(makeDriver("-g", *LINUX)) == ["error_no_input_files"]
    assert makeDriver("-version").diagnostics == []
    assert ids(makeDriver("-g", *LINUX, "--")) == ["error_no_input_files"]


def test_inputs_after_dash_dash_count_as_inputs():
    d = makeDriver("-g", *LINUX, "--", "x.src")
    assert d.inputs == ["x.src"]
    assert d.diagnostics == []


def test_empty_clang_argument_is_dropped():
    d = makeDriver("a.src", "-Xcc", *LINUX)
    assert d.clangArgs == []
    assert "-Xcc" not in d.frontendJob()
