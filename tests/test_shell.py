from drivekit import shell


def test_escape_safe():
    assert shell.escape("foo") == "foo"
    assert shell.escape("-Xcca,b") == "-Xcca,b"
    assert shell.escape("/usr/lib/x86_64-linux-gnu") == "/usr/lib/x86_64-linux-gnu"
    assert shell.escape("-DNAME=value") == "-DNAME=value"


def test_escape_quotes():
    assert shell.escape("") == "''"
    assert shell.escape("a b") == "'a b'"
    assert shell.escape("$HOME") == "'$HOME'"
    assert shell.escape("it's") == "'it'\"'\"'s'"


def test_join():
    assert shell.join(["cc", "-o", "my app"]) == "cc -o 'my app'"
