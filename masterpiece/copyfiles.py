"""Copy each file named in a list into the files/ directory."""

from __future__ import annotations

import argparse
import subprocess
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

Runner = Callable[[str], object]


def copy_command(name: str) -> str:
    """Return the shell command that copies name into files/."""
    return f"cp {name} files/{name}"


def _shell(command: str) -> object:
    return subprocess.run(command, shell=True, check=False)


def copy_listed(
    list_path: Union[str, Path] = "test.txt", runner: Optional[Runner] = None
) -> List[str]:
    """Echo and run a copy command per line of list_path; return the commands."""
    run = runner if runner is not None else _shell
    try:
        handle = open(list_path, encoding="utf-8", newline="\n")
    except OSError:
        return []
    commands = []
    with handle:
        for line in handle:
            command = copy_command(line.removesuffix("\n"))
            sys.stdout.write(command)
            sys.stdout.flush()
            run(command)
            commands.append(command)
    return commands


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Copy listed files into files/.")
    parser.add_argument("list_file", nargs="?", default="test.txt")
    args = parser.parse_args(argv)
    copy_listed(args.list_file)
    return 0


if __name__ == "__main__":
    sys.exit(main())