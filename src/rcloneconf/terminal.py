"""Line oriented prompts used by the interactive editors.

All reading goes through `Terminal._input` and `Terminal._getpass`, so a
subclass (or a test) can script a whole session.

"""

import getpass
import sys
from typing import List, Optional, Sequence

from rcloneconf import PasswordError
from rcloneconf.config.encryption import check_password


class Terminal(object):

    def __init__(self, auto_confirm: bool = False):
        self.auto_confirm = auto_confirm

    def _input(self, prompt: str = "") -> str:
        return input(prompt)

    def _getpass(self, prompt: str = "") -> str:
        return getpass.getpass(prompt)

    def write(self, message: str = ""):
        print(message)

    def read_line(self, prompt: str = "") -> str:
        return self._input(prompt).strip()

    def command(self, commands: Sequence[str]) -> str:
        """Offer single letter commands, e.g. ["yYes", "nNo"].

        Returns the lower case letter chosen; asks until one matches.

        """
        options = []
        for text in commands:
            self.write("{}) {}".format(text[0], text[1:]))
            options.append(text[0])
        option_help = "/".join(options)
        while True:
            result = self.read_line("{}> ".format(option_help)).lower()
            if len(result) == 1 and result in options:
                return result

    def confirm(self) -> bool:
        if self.auto_confirm:
            return True
        return self.command(["yYes", "nNo"]) == "y"

    def choose(
        self,
        what: str,
        defaults: Sequence[str],
        helps: Optional[Sequence[str]] = None,
        new_ok: bool = False,
    ) -> str:
        """Pick one of `defaults` by number or value.

        With `new_ok` any other typed value is accepted as well.

        """
        description = "your own" if new_ok else "an existing"
        self.write(
            "Choose a number from below, or type in {} value".format(
                description
            )
        )
        for pos, text in enumerate(defaults, 1):
            lines: List[str] = []
            if helps is not None and helps[pos - 1]:
                lines.extend(helps[pos - 1].split("\n"))
            lines.append('"{}"'.format(text))
            if len(lines) == 1:
                self.write("{:2d} > {}".format(pos, text))
                continue
            mid = (len(lines) - 1) // 2
            for i, line in enumerate(lines):
                if i == 0:
                    sep = "/"
                elif i == len(lines) - 1:
                    sep = "\\"
                else:
                    sep = "|"
                number = "{:2d}".format(pos) if i == mid else "  "
                self.write("{} {} {}".format(number, sep, line))
        while True:
            result = self.read_line("{}> ".format(what))
            try:
                i = int(result)
            except ValueError:
                if new_ok or result in defaults:
                    return result
                continue
            if 1 <= i <= len(defaults):
                return defaults[i - 1]

    def choose_number(self, what: str, minimum: int, maximum: int) -> int:
        while True:
            result = self.read_line("{}> ".format(what))
            try:
                i = int(result)
            except ValueError as e:
                self.write("Bad number: {}".format(e))
                continue
            if i < minimum or i > maximum:
                self.write(
                    "Out of range - {} to {} inclusive".format(minimum, maximum)
                )
                continue
            return i

    def get_password(self, prompt: str) -> str:
        """Ask for a password until a usable one is entered."""
        print(prompt, file=sys.stderr)
        while True:
            password = self._getpass("password:")
            try:
                return check_password(password)
            except PasswordError as e:
                print("Bad password: {}".format(e), file=sys.stderr)

    def change_password(self, name: str) -> str:
        """Ask for a password twice until both entries match."""
        while True:
            a = self.get_password("Enter {} password:".format(name))
            b = self.get_password("Confirm {} password:".format(name))
            if a == b:
                return a
            self.write("Passwords do not match!")
