"""Operator interaction: list display and yes/no confirmation."""

import sys
from collections.abc import Callable, Sequence
from typing import TextIO

RULE = "=" * 40


class Prompter:
    """Blocking console prompts.

    Args:
        assume_yes: Answer every confirmation affirmatively without asking
        input_func: Function reading one line of operator input
        out: Stream for displayed lists
    """

    def __init__(
        self,
        assume_yes: bool = False,
        input_func: Callable[[str], str] = input,
        out: TextIO | None = None,
    ) -> None:
        self.assume_yes = assume_yes
        self.input_func = input_func
        self.out = out if out is not None else sys.stdout

    def show_list(self, label: str, packages: Sequence[str]) -> None:
        lines = ["", RULE, f"=== {label} packages ===", RULE]
        if packages:
            lines.extend(f"  - {pkg}" for pkg in packages)
        else:
            lines.append("  (none)")
        lines.extend([RULE, ""])
        self.out.write("\n".join(lines) + "\n")
        self.out.flush()

    def confirm(self, question: str) -> bool:
        """Ask a y/N question; only 'y' or 'yes' counts as affirmative."""
        if self.assume_yes:
            self.out.write(f"{question} [y/N]: y (assumed)\n")
            return True
        try:
            answer = self.input_func(f"{question} [y/N]: ")
        except EOFError:
            return False
        return answer.strip().lower() in ("y", "yes")
