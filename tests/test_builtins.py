import io
import os

import pytest

from minishell.builtins import (
    ShellExit,
    cd,
    check_opt,
    echo,
    env,
    exit_shell,
    export,
    is_builtin,
    pwd,
    run_builtin,
    unset,
)
from minishell.command import Command
from minishell.environment import Environment, ShellContext


def make_ctx(**variables):
    return ShellContext(env=Environment(variables))


@pytest.mark.parametrize("name", ["echo", "cd", "pwd", "export", "unset", "env", "exit"])
def test_known_builtins(name):
    assert is_builtin(name)


@pytest.mark.parametrize("name", ["ls", "", None, "ECHO", "echo "])
def test_not_builtins(name):
    assert not is_builtin(name)


def test_check_opt():
    assert check_opt("nnn", "n")
    assert not check_opt("nx", "n")
    assert check_opt("", "n")


def test_echo_joins_arguments():
    out = io.StringIO()
    assert echo(make_ctx(), ["hello", "world"], out) == 0
    assert out.getvalue() == "hello world\n"


def test_env_lists_entries():
    ctx = make_ctx(A="1", B="2")
    ctx.status = 5
    out = io.StringIO()
    assert env(ctx, [], out) == 0
    assert out.getvalue().splitlines() == ctx.env.to_list()
    assert ctx.status == 0


def test_export_then_unset():
    ctx = make_ctx(HOME="/home/someone")
    assert export(ctx, ["FOO=bar"], io.StringIO()) == 0
    assert ctx.env.get("FOO") == "bar"
    export(ctx, ["FOO=baz"], io.StringIO())
    assert ctx.env.get("FOO") == "baz"
    assert unset(ctx, ["FOO"], io.StringIO()) == 0
    assert ctx.env.get("FOO") is None
    assert ctx.env.get("HOME") == "/home/someone"


def test_unset_missing_reports():
    out = io.StringIO()
    assert unset(make_ctx(), ["NOPE"], out) == 1
    assert out.getvalue() == "bash: unset: Cannot remove NOPE\n"


def test_pwd_writes_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out = io.StringIO()
    assert pwd(make_ctx(), [], out) == 0
    assert out.getvalue() == f"{os.getcwd()}\n"


def test_cd_changes_directory_and_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "sub"
    target.mkdir()
    ctx = make_ctx(PWD=str(tmp_path))
    assert cd(ctx, [str(target)], io.StringIO()) == 0
    assert os.path.samefile(os.getcwd(), target)
    assert ctx.env.get("PWD") == str(target)
    assert ctx.env.get("OLD_PWD") == str(tmp_path)


def test_cd_too_many_arguments(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out = io.StringIO()
    assert cd(make_ctx(PWD=str(tmp_path)), ["a", "b"], out) == 1
    assert out.getvalue() == "cd : too many arguments\n"


def test_cd_missing_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    ctx = make_ctx(PWD=str(tmp_path))
    assert cd(ctx, [str(tmp_path / "absent")], io.StringIO()) == 1
    assert ctx.status == 1
    assert os.path.samefile(os.getcwd(), tmp_path)


def test_exit_with_status():
    out = io.StringIO()
    with pytest.raises(ShellExit) as info:
        exit_shell(make_ctx(), ["42"], out)
    assert info.value.status == 42
    assert out.getvalue() == "exit\n"


def test_exit_uses_last_status():
    ctx = make_ctx()
    ctx.status = 7
    with pytest.raises(ShellExit) as info:
        exit_shell(ctx, [], io.StringIO())
    assert info.value.status == 7


def test_exit_non_numeric_reports():
    out = io.StringIO()
    with pytest.raises(ShellExit) as info:
        exit_shell(make_ctx(), ["abc"], out)
    assert "bash: exit: abc: numeric argument required\n" in out.getvalue()
    assert info.value.status == 0


def test_run_builtin_sets_status():
    ctx = make_ctx()
    ctx.status = 3
    out = io.StringIO()
    assert run_builtin(ctx, Command(name="echo", args=["hi"]), out) == 0
    assert ctx.status == 0
    assert out.getvalue() == "hi\n"


def test_run_builtin_failure_status():
    ctx = make_ctx()
    assert run_builtin(ctx, Command(name="unset", args=["MISSING"]), io.StringIO()) == 1
    assert ctx.status == 1


def test_run_builtin_rejects_program():
    with pytest.raises(ValueError):
        run_builtin(make_ctx(), Command(name="ls"), io.StringIO())