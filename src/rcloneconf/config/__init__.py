import logging
import os
import re
from typing import Dict, Iterator, List, Optional

from configupdater import ConfigUpdater

logger = logging.getLogger(__name__)

ENVIRONMENT_PREFIX = "RCLONE_CONFIG_"
ENVIRONMENT_SECTION = re.compile(r"^RCLONE_CONFIG_(.*?)_TYPE=.*$", re.DOTALL)

# Keys with a meaning for the configuration machinery itself.
CONFIG_TOKEN = "token"
CONFIG_CLIENT_ID = "client_id"
CONFIG_CLIENT_SECRET = "client_secret"
CONFIG_AUTH_URL = "auth_url"
CONFIG_TOKEN_URL = "token_url"
CONFIG_AUTOMATIC = "config_automatic"

TRUE_VALUES = ("1", "t", "T", "TRUE", "true", "True")
FALSE_VALUES = ("0", "f", "F", "FALSE", "false", "False")


def config_to_env(section: str, key: str) -> str:
    """Name of the environment variable overriding `key` in `section`.

    ("myremote", "ignore-size") -> "RCLONE_CONFIG_MYREMOTE_IGNORE_SIZE"

    """
    name = "{}_{}".format(section, key).replace("-", "_")
    return ENVIRONMENT_PREFIX + name.upper()


def new_updater() -> ConfigUpdater:
    """An empty document. Option names keep their case."""
    updater = ConfigUpdater()
    updater.optionxform = lambda optionstr: optionstr
    return updater


def parse_bool(value: str) -> bool:
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ValueError("invalid boolean {!r}".format(value))


class Store(object):
    """The in-memory configuration: remotes (sections) with their keys.

    Reading a key always consults the environment first, so that every
    stored value can be overridden without touching the file.

    """

    def __init__(self, updater: Optional[ConfigUpdater] = None):
        if updater is None:
            updater = new_updater()
        self.updater = updater

    def __str__(self):
        return str(self.updater)

    def __contains__(self, section):
        return self.updater.has_section(section)

    def __iter__(self) -> Iterator[str]:
        return iter(self.updater.sections())

    # Reading

    def _stored(self, section, key):
        if not self.updater.has_section(section):
            return None
        if not self.updater.has_option(section, key):
            return None
        value = self.updater.get(section, key).value
        if not value:
            return None
        return value

    def get(self, section: str, key: str, default: str = "") -> str:
        value = os.environ.get(config_to_env(section, key))
        if value is not None:
            return value
        value = self._stored(section, key)
        return default if value is None else value

    def get_bool(self, section: str, key: str, default: bool = False) -> bool:
        env_key = config_to_env(section, key)
        value = os.environ.get(env_key)
        if value is not None:
            try:
                return parse_bool(value)
            except ValueError as e:
                logger.error(
                    "Couldn't parse %r into bool - ignoring: %s", env_key, e
                )
        value = self._stored(section, key)
        if value is None:
            return default
        try:
            return parse_bool(value)
        except ValueError:
            return default

    def get_int(self, section: str, key: str, default: int = 0) -> int:
        env_key = config_to_env(section, key)
        value = os.environ.get(env_key)
        if value is not None:
            try:
                return int(value)
            except ValueError as e:
                logger.error(
                    "Couldn't parse %r into int - ignoring: %s", env_key, e
                )
        value = self._stored(section, key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default

    def section_list(self) -> List[str]:
        """Sections stored in the configuration, in file order."""
        return self.updater.sections()

    def sections(self) -> List[str]:
        """Stored sections plus those declared by the environment.

        A section is declared by an environment variable
        RCLONE_CONFIG_<NAME>_TYPE; its name is the lower-cased <NAME>.

        """
        sections = self.section_list()
        for key, value in os.environ.items():
            match = ENVIRONMENT_SECTION.match("{}={}".format(key, value))
            if match is None:
                continue
            name = match.group(1).lower()
            if name not in sections:
                sections.append(name)
        return sections

    def keys(self, section: str) -> List[str]:
        if not self.updater.has_section(section):
            return []
        return self.updater.options(section)

    def items(self, section: str) -> Dict[str, str]:
        return {key: self.get(section, key) for key in self.keys(section)}

    def as_dict(self) -> Dict[str, Dict[str, str]]:
        return {name: self.items(name) for name in self.section_list()}

    # Writing

    def _add_section(self, section):
        sections = self.updater.sections()
        if sections and not str(self.updater).endswith("\n\n"):
            self.updater[sections[-1]].add_after.space().section(section)
        else:
            self.updater.add_section(section)

    def set(self, section: str, key: str, value: str):
        """Set a value in memory only. Missing sections are created."""
        if not self.updater.has_section(section):
            self._add_section(section)
        self.updater.set(section, key, value)

    def delete_key(self, section: str, key: str) -> bool:
        """Remove a key, return whether it existed."""
        if not self.updater.has_section(section):
            return False
        return self.updater.remove_option(section, key)

    def delete_section(self, section: str) -> bool:
        """Remove a section, return whether it existed.

        A blank gap left in front of the first remaining section goes
        with it, so the document never starts with an empty line.

        """
        if not self.updater.has_section(section):
            return False
        block = self.updater[section]
        leading = block.previous_block is None
        following = block.next_block
        self.updater.remove_section(section)
        if leading and following is not None and not str(following).strip():
            following.detach()
        return True

    def copy_section(self, source: str, target: str):
        for key in self.keys(source):
            self.set(target, key, self.updater.get(source, key).value or "")
