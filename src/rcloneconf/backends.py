"""Registry of the storage backends a remote can be configured for.

Backends are registered in code or found through the
``rcloneconf.backends`` entry point group. Each entry point resolves to a
`Backend` instance.

"""

from typing import Callable, Dict, Iterator, List, Optional

from importlib_metadata import entry_points

from rcloneconf import UnknownBackend
from rcloneconf._output import output

ENTRY_POINT_GROUP = "rcloneconf.backends"


class OptionExample(object):

    def __init__(self, value: str, help: str = "", provider: str = ""):
        self.value = value
        self.help = help
        self.provider = provider

    def as_dict(self):
        return {
            "Value": self.value,
            "Help": self.help,
            "Provider": self.provider,
        }


class Option(object):
    """A single key a backend asks for when configuring a remote."""

    def __init__(
        self,
        name: str,
        help: str = "",
        is_password: bool = False,
        optional: bool = False,
        examples: Optional[List[OptionExample]] = None,
    ):
        self.name = name
        self.help = help
        self.is_password = is_password
        self.optional = optional
        self.examples = list(examples or [])

    def as_dict(self):
        return {
            "Name": self.name,
            "Help": self.help,
            "IsPassword": self.is_password,
            "Optional": self.optional,
            "Examples": [e.as_dict() for e in self.examples],
        }


class Backend(object):
    """A backend type: its options and an optional interactive setup.

    `config` is called as ``config(session, name)`` after the options of
    remote `name` have been filled in.

    """

    def __init__(
        self,
        name: str,
        description: str = "",
        prefix: Optional[str] = None,
        options: Optional[List[Option]] = None,
        config: Optional[Callable] = None,
    ):
        self.name = name
        self.description = description
        self.prefix = prefix or name
        self.options = list(options or [])
        self.config = config

    def option(self, name: str) -> Optional[Option]:
        for option in self.options:
            if option.name == name:
                return option
        return None

    def as_dict(self):
        return {
            "Name": self.name,
            "Description": self.description,
            "Prefix": self.prefix,
            "Options": [o.as_dict() for o in self.options],
        }


class Registry(object):

    def __init__(self, entry_point_group: Optional[str] = None):
        self.entry_point_group = entry_point_group
        self._backends: Dict[str, Backend] = {}
        self._loaded = entry_point_group is None

    def register(self, backend: Backend) -> Backend:
        self._backends[backend.name] = backend
        return backend

    def load_entry_points(self):
        self._loaded = True
        for entry_point in entry_points(group=self.entry_point_group):
            backend = entry_point.load()
            if callable(backend) and not isinstance(backend, Backend):
                backend = backend()
            output.annotate(
                "Registered backend `{}` from {}".format(
                    backend.name, entry_point.value
                ),
                debug=True,
            )
            self._backends.setdefault(backend.name, backend)

    def _ensure_loaded(self):
        if not self._loaded:
            self.load_entry_points()

    def __iter__(self) -> Iterator[Backend]:
        self._ensure_loaded()
        return iter(sorted(self._backends.values(), key=lambda b: b.name))

    def __len__(self):
        self._ensure_loaded()
        return len(self._backends)

    def find(self, name: str) -> Optional[Backend]:
        self._ensure_loaded()
        return self._backends.get(name)

    def must_find(self, name: str) -> Backend:
        backend = self.find(name)
        if backend is None:
            raise UnknownBackend.from_context(name)
        return backend

    def type_option(self) -> Option:
        """The pseudo option used to pick a backend for a new remote."""
        return Option(
            "Storage",
            help="Type of storage to configure.",
            examples=[
                OptionExample(backend.name, backend.description)
                for backend in self
            ],
        )

    def as_list(self):
        return [backend.as_dict() for backend in self]


registry = Registry(ENTRY_POINT_GROUP)
