"""
Shell completion for command trees.

Scope
- script(shell, name): the completion script for a program, per shell.
- install(shell, name): write that script where the shell looks for it.
- query(commands, words) / format(shell, entries): the live side, called back
  by the installed script on every <TAB> through the hidden
  "<name> __complete query <words...>" builtin (see Runner, Config.completion).

Supported shells: bash, fish, zsh. The shell is detected from $SHELL ("sh"
counts as bash).
"""
import collections
import os
import os.path
import re
from pathlib import Path

from loguru import logger

from .faults import UnknownShellError
from .utils import *

SHELLS = ("bash", "fish", "zsh")

Entry = collections.namedtuple("Entry", ("name", "alias", "descr"))

_SCRIPTS = {
    "bash": r"""_%(ident)s() {
	local IFS=$'\n'
	COMPREPLY=( $(SHELL=bash %(name)s __complete query "${COMP_WORDS[@]:0:COMP_CWORD+1}" 2>/dev/null) )

	if [[ ${#COMPREPLY[@]} -eq 0 ]]; then
		local cur=${COMP_WORDS[COMP_CWORD]}
		COMPREPLY=( $(compgen -o plusdirs -f -- "$cur") )
	fi
}

complete -F _%(ident)s %(name)s
""",
    "fish": r"""function __fish_%(ident)s
  SHELL=fish %(name)s __complete query \
    (commandline --current-process --cut-at-cursor --tokenize) \
    "$(commandline --current-process --current-token)" \
    2>/dev/null
end

complete --command %(name)s --arguments '(__fish_%(ident)s)'
""",
    "zsh": r"""#compdef %(name)s
_%(ident)s() {
  local -a completions
  completions=(${(f)"$(SHELL=zsh %(name)s __complete query "${(@)words[1,CURRENT]}" 2>/dev/null)"})

  if (( ${#completions} == 0 )); then
    _files
  else
    _describe command completions
  fi
}

_%(ident)s "$@"
""",
}

_LOCATIONS = {
    "bash": ("/etc/bash_completion.d", "%s.bash"),
    "fish": ("/etc/fish/completions", "%s.fish"),
    "zsh": ("/usr/local/share/zsh/site-functions", "_%s"),
}


def detect():
    """
    Name of the user's shell, from $SHELL.
    """
    shell = os.path.basename(os.environ.get("SHELL", ""))
    return "bash" if shell == "sh" else shell


def _ensure(shell):
    if shell not in SHELLS:
        raise UnknownShellError(
            "unknown shell %r (want: %s)" % (shell, ", ".join(SHELLS)),
            input=shell,
        )


def script(shell, name, /):
    """
    Render the completion script of program name for shell.
    """
    _ensure(shell)
    return _SCRIPTS[shell] % {"name": name, "ident": re.sub(r"\W", "_", name)}


def install(shell, name, /, *, directory=Unset, filename=Unset):
    """
    Write the completion script to the shell's completion directory.

    Defaults
    - bash: /etc/bash_completion.d/<name>.bash
    - fish: /etc/fish/completions/<name>.fish
    - zsh:  /usr/local/share/zsh/site-functions/_<name>

    The directory is created (mode 0o700) when missing; an existing file is
    overwritten. Returns the path written.
    """
    text = script(shell, name)
    default, pattern = _LOCATIONS[shell]
    directory = Path(coalesce(directory, default))
    directory.mkdir(mode=0o700, parents=True, exist_ok=True)
    path = directory / coalesce(filename, pattern % name)
    path.write_text(text)
    logger.debug("installed {} completion script to {}", shell, path)
    return path


def query(commands, words, /):
    """
    Completion candidates for a partially typed command line.

    Parameters
    - commands: the top-level commands.
    - words: the command line as the shell splits it, program first and the
      word under the cursor last (possibly "").

    Behavior
    - walks the complete words by name or alias, ignoring flags;
    - stops with no candidates on an unknown word, on a leaf (its own
      arguments belong to its handler) or when the partial word is a flag;
    - returns the visible commands of the reached level whose name or alias
      starts with the partial word.
    """
    *path, partial = list(words)[1:] or [""]
    if partial.startswith("-"):
        return []

    children = commands
    for word in path:
        if word.startswith("-"):
            continue
        for child in children:
            if child.matches(word):
                break
        else:
            return []
        if child.leaf:
            return []
        children = child.children

    return [
        Entry(child.name, child.alias, child.descr)
        for child in children
        if not child.hidden and any(token.startswith(partial) for token in child.tokens)
    ]


def format(shell, entries, /):
    """
    Serialize query() results the way the script for shell reads them.

    - bash: one token per line (alias before name).
    - fish: "<token>\\t<descr>" per line.
    - zsh:  "<token>:<descr>" per line (":" in tokens escaped, brackets and
      single quotes in descriptions softened).
    """
    _ensure(shell)
    lines = []
    for entry in entries:
        tokens = (entry.alias, entry.name) if entry.alias else (entry.name,)
        match shell:
            case "bash":
                lines.extend(tokens)
            case "fish":
                lines.extend("%s\t%s" % (token, entry.descr) for token in tokens)
            case "zsh":
                descr = entry.descr.translate(str.maketrans("[]'", '()"'))
                lines.extend("%s:%s" % (token.replace(":", r"\:"), descr) for token in tokens)
    return "".join(line + "\n" for line in lines)


__all__ = (
    "SHELLS",
    "Entry",
    "detect",
    "script",
    "install",
    "query",
    "format",
)
