# minishell

A small interactive command shell. It reads a line at a `->` prompt, splits it
into words, checks quotes and pipes, builds a pipeline of commands and runs it.

## Features

- Pipelines: `ls | wc -l`
- Redirections: `<` (input), `>` (output, truncating), `>>` (append) and
  `<<` (here-document, read at a `> ` prompt until the delimiter line)
- Single and double quotes keep spaces inside one word; the quote characters
  are removed before the command runs
- Program lookup through the `PATH` entry of the shell's environment; names
  containing a `/` are taken as paths (relative to the working directory
  unless absolute)
- Builtins: `echo`, `cd`, `pwd`, `export`, `unset`, `env`, `exit`
- Exit statuses: `127` when a command is not found, `126` when it cannot be
  run or is a directory, `1` on a syntax or redirection error
- `Ctrl-C` and `Ctrl-\` are answered according to what the shell is doing:
  waiting for input, reading a here-document or running a command

## Installing

```
pip install .
```

## Running

```
minishell
```

The shell starts with a copy of the current environment. Type commands at the
prompt. End the session with `exit` or with end of input (`Ctrl-D`, which
leaves with status 0). `exit` with no argument leaves with the status of the
last command; `exit N` leaves with `N` modulo 256.

A lone builtin runs inside the shell, so `cd`, `export` and `unset` change the
session. A builtin that is part of a pipeline works on a copy of the
environment and leaves the session unchanged.

## Using it from Python

```python
from minishell.shell import Shell

shell = Shell({"PATH": "/usr/bin:/bin"})
status = shell.run_line("echo hello")
print(shell.ctx.status, shell.ctx.env.get("PATH"))
```

- `Shell(environ=None, reader=None, out=None)` — `environ` is a mapping or a
  list of `NAME=value` strings (default: `os.environ`); `reader` is called
  with a prompt and returns a line or `None` at end of input (default:
  `input()`); `out` receives parse errors and signal messages.
- `Shell.run_line(line)` parses and runs one line and returns its status; it
  raises `minishell.builtins.ShellExit` when the line runs `exit`.
- `Shell.run()` runs the read–run loop and returns the status to exit with.
- `Shell.install_signals()` installs the `Ctrl-C` / `Ctrl-\` handlers.
- `minishell.shell.main()` is the function behind the `minishell` command.

The pieces can also be used on their own:

- `minishell.tokens` — `split_words`, `tokenize`, `check_tokens`, `Token`,
  `TokenType`, `ParseError`
- `minishell.syntax` — `check_line`, `quote_state`, `has_dangling_pipe`
- `minishell.command` — `build_commands`, `build_command`, `split_pipeline`,
  `check_command`, `Command`
- `minishell.environment` — `Environment` (`get`, `set`, `add`, `remove`,
  `to_list`, `to_dict`) and `ShellContext`
- `minishell.redirections` — `read_heredoc`, `open_redirect`,
  `resolve_redirections`, `RedirectionError`
- `minishell.builtins` — the builtins, `is_builtin`, `run_builtin`, `ShellExit`
- `minishell.executor` — `execute`, `find_command`, `resolve_path`,
  `CommandNotFound`

## What it does not do

- No variable expansion: `$NAME` and `$?` are passed on literally, in command
  lines and in here-documents alike.
- Operators must stand as separate words: `ls > out` redirects, `ls>out` is a
  single word.
- `echo` takes no options; `-n` is printed like any other argument.
- `cd` needs exactly one argument; there is no `cd` to a home directory.
- No `;`, `&&`, `||`, background jobs, globbing or history expansion.

## Running the tests

```
pip install .[test]
pytest
```