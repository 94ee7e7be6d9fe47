import pathlib
import sys
from typing import Optional

from rcloneconf import PasswordError
from rcloneconf._output import output
from rcloneconf.backends import Registry, registry as default_registry
from rcloneconf.config import Store
from rcloneconf.config.encryption import decode, derive_key, encode
from rcloneconf.config.file import write_atomic
from rcloneconf.config.obscure import Obscurer
from rcloneconf.terminal import Terminal


class Session(object):
    """Everything one process knows about its configuration.

    The session owns the in-memory store and the encryption key and is
    handed to every operation that reads, changes or saves the store.

    """

    def __init__(
        self,
        path,
        terminal: Optional[Terminal] = None,
        registry: Optional[Registry] = None,
        obscurer: Optional[Obscurer] = None,
        ask_password: bool = True,
    ):
        self.path = pathlib.Path(path)
        self.store = Store()
        self.key: Optional[bytes] = None
        self.ask_password = ask_password
        self.terminal = terminal if terminal is not None else Terminal()
        self.registry = registry if registry is not None else default_registry
        self.obscurer = obscurer if obscurer is not None else Obscurer()

    @property
    def encrypted(self) -> bool:
        return self.key is not None

    # Password handling

    def set_password(self, password):
        """Derive and keep the key for `password`."""
        self.key = derive_key(password)

    def clear_password(self):
        """Forget the key. The next save writes plain text."""
        self.key = None

    def ask_for_password(self, prompt: str):
        if self.key is not None:
            return
        while True:
            password = self.terminal.get_password(prompt)
            try:
                self.set_password(password)
            except PasswordError as e:
                print("Error: {}".format(e), file=sys.stderr)
                continue
            return

    def change_password(self):
        self.set_password(self.terminal.change_password("NEW configuration"))

    # Loading and saving

    def read(self) -> Store:
        """Read and decode the file. Raises FileNotFoundError."""
        data = self.path.read_bytes()
        return Store(decode(data, self))

    def load(self):
        try:
            self.store = self.read()
        except FileNotFoundError:
            output.annotate(
                "Config file {} not found - using defaults".format(self.path)
            )
            self.store = Store()
        else:
            output.annotate(
                "Using config file from {}".format(self.path), debug=True
            )

    def save(self):
        write_atomic(self.path, encode(self.store.updater, self.key))

    def set_value_and_save(self, name: str, key: str, value: str):
        """Set a single value and write it into the current file.

        The file is re-read first so that changes made by other processes
        since loading are kept.

        """
        self.store.set(name, key, value)
        try:
            reloaded = self.read()
        except FileNotFoundError:
            return
        if name not in reloaded:
            return
        self.store = reloaded
        reloaded.set(name, key, value)
        self.save()
