from rcloneconf.conftest import ScriptedTerminal


def test_command_returns_lower_case_choice(capsys):
    terminal = ScriptedTerminal(["", "yes", "Y"])
    assert terminal.command(["yYes", "nNo"]) == "y"
    assert capsys.readouterr().out == "y) Yes\nn) No\n"
    assert terminal.prompts == ["y/n> "] * 3


def test_confirm(capsys):
    assert ScriptedTerminal(["n"]).confirm() is False
    assert ScriptedTerminal(auto_confirm=True).confirm() is True


def test_choose_layout(capsys):
    terminal = ScriptedTerminal(["2"])
    value = terminal.choose(
        "Storage", ["a", "b"], ["Help a", "Line1\nLine2"], new_ok=False
    )
    assert value == "b"
    assert capsys.readouterr().out == (
        "Choose a number from below, or type in an existing value\n"
        " 1 / Help a\n"
        '   \\ "a"\n'
        "   / Line1\n"
        " 2 | Line2\n"
        '   \\ "b"\n'
    )


def test_choose_without_help(capsys):
    terminal = ScriptedTerminal(["3", "c", "a"])
    assert terminal.choose("x", ["a", "b"]) == "a"
    assert capsys.readouterr().out == (
        "Choose a number from below, or type in an existing value\n"
        " 1 > a\n"
        " 2 > b\n"
    )


def test_choose_own_value():
    terminal = ScriptedTerminal(["mine"])
    assert terminal.choose("x", ["a", "b"], new_ok=True) == "mine"


def test_choose_number(capsys):
    terminal = ScriptedTerminal(["x", "5", "10"])
    assert terminal.choose_number("Bits", 8, 16) == 10
    out = capsys.readouterr().out
    assert "Bad number: " in out
    assert "Out of range - 8 to 16 inclusive" in out


def test_get_password_normalises(capsys):
    terminal = ScriptedTerminal(passwords=["", " hunter2 "])
    assert terminal.get_password("Enter password:") == "hunter2"
    err = capsys.readouterr().err
    assert err.startswith("Enter password:\n")
    assert "Bad password: no characters in password" in err


def test_change_password_needs_matching_entries(capsys):
    terminal = ScriptedTerminal(passwords=["a1", "a2", "b", "b"])
    assert terminal.change_password("NEW configuration") == "b"
    assert "Passwords do not match!" in capsys.readouterr().out
