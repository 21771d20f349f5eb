# minish

A small interactive shell for POSIX systems. It reads one line at a time,
splits it into words, expands variables, and runs either a built-in command
or a program found on `PATH`. Pipes, file redirections and here-documents
are supported.

## Installing

    pip install .

## Running

    minish

The prompt is `minishell: `. The shell starts from the current process
environment. Press Ctrl-D at the prompt to leave: the shell prints `exit`
and ends with the status of the last command. Ctrl-C moves to a fresh line
instead of stopping the shell; Ctrl-\ is ignored.

Commands are read from standard input only; command-line arguments given to
`minish` are not used.

## What it understands

- **Quotes**: text inside a matching pair of `'...'` or `"..."` stays one
  word, and `|`, `<` and `>` inside it are plain characters. Inside single
  quotes `$` is not expanded. A quote without a partner is kept as an
  ordinary character.
- **Variables**: `$NAME` is replaced by its value and `$?` by the status of
  the last command. If the first variable named in a word is not set, the
  word is cut off at its first `$`.
- **Assignments**: a line starting with `NAME=value` sets shell variables.
  They are not passed to programs until exported with `export`.
- **Pipes**: `ls | grep py | wc -l`. Every command of a pipeline runs in its
  own child process, so variables set inside a pipeline do not reach the
  shell.
- **Redirections**: `> file` (truncate), `>> file` (append), `< file` (read)
  and `<< WORD` (here-document: lines are read until one equals `WORD`, with
  variables expanded). A here-document is staged in a file named `.heredoc`
  in the current directory, which is removed afterwards. Operators need no
  spaces around them: `echo hi>out` works.
- **Built-ins**:
  - `echo` — prints its arguments separated by spaces; a first argument
    starting with `-n` drops the trailing newline.
  - `cd DIR` — changes directory and updates `PWD`.
  - `pwd` — prints the working directory.
  - `export NAME=value` / `export NAME` — sets and exports, or exports an
    existing variable. Invalid names are reported and set `$?` to 1.
  - `unset NAME` — removes a variable.
  - `env` — prints the exported variables.
  - `exit` — leaves the shell with the last status.

Anything else is run as a program: the name is first tried as a path as
given, then in each directory of `PATH`. Failures are reported and set `$?`
to 126 (permission denied, or a directory) or 127 (no such file, or command
not found).

Misplaced operators, such as an operator at the end of a line or two
operators in a row, are reported as syntax errors and the line is not run.

Messages are printed in Portuguese, for example
`ls: comando não encontrado`.

## History

Every line entered is appended to `.minishell_history` in the current
directory. On start that file is read back, and its lines become available
for line editing where the `readline` module is present.

## What it does not do

There is no `&&`, `||` or `;`, no globbing, no backslash escapes, no
subshells or command substitution, and no job control. `cd` needs a
directory argument; it does not go to the home directory on its own. The
shell does not run script files.

## Using it from Python

The pieces can be used on their own:

- `minish.environment.Environment` holds the variables in order, the
  exported subset and the last status (`get`, `lookup`, `assign`, `export`,
  `unset`, `exported`, `entries`, `set_status`, `status`).
- `minish.lexer.parse_line(line, env)` turns a line into a list of words, or
  `None` when there is nothing to run, and raises
  `minish.lexer.ShellSyntaxError` on bad operator use. Pass the words through
  `minish.lexer.restore_characters` before running them as a simple command.
- `minish.builtins.run_command(line, args, env)` runs one simple command;
  `exit` raises `minish.builtins.ShellExit` carrying the status.
- `minish.executor.exec_program(args, env)` runs an external program and
  returns `$?`.
- `minish.pipeline.run_pipeline(line, args, env)` and
  `minish.redirection.run_redirections(line, args, env)` handle pipes and
  redirections.
- `minish.shell.execute_command(line, args, env)` chooses among these, and
  `minish.shell.main()` starts the interactive loop and returns the exit
  status.

```python
from minish.environment import Environment
from minish.lexer import parse_line

env = Environment({"NAME": "world"})
print(parse_line("echo hello $NAME", env))  # ['echo', 'hello', 'world']
```

## Tests

    pip install .[test]
    pytest