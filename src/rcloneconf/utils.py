import os
import pathlib
import re
import sys
import tempfile
from typing import Mapping, Optional

from rcloneconf import InvalidRemoteName
from rcloneconf._output import output

CONFIG_FILE_NAME = "rclone.conf"
HIDDEN_CONFIG_FILE_NAME = "." + CONFIG_FILE_NAME

# Same pattern used for `name:path` remote references on the command line.
REMOTE_MATCHER = re.compile(r"^([\w_ -]+):(.*)$", re.ASCII)


def home_directory(environ: Mapping[str, str]) -> Optional[str]:
    home = environ.get("HOME")
    if home:
        return home
    try:
        return str(pathlib.Path.home())
    except (KeyError, RuntimeError):
        return None


def make_config_path(
    environ: Optional[Mapping[str, str]] = None,
) -> pathlib.Path:
    """Return the path of the configuration file.

    Existing files are preferred in this order:

    - $XDG_CONFIG_HOME/rclone/rclone.conf (or ~/.config/rclone/rclone.conf)
    - ~/.rclone.conf

    If neither exists the XDG location is created, falling back to
    ~/.rclone.conf and finally ./.rclone.conf.

    """
    if environ is None:
        environ = os.environ
    home = home_directory(environ)

    xdg_config_dir = None
    xdg_dir = environ.get("XDG_CONFIG_HOME")
    if xdg_dir:
        xdg_config_dir = pathlib.Path(xdg_dir) / "rclone"
    elif home:
        xdg_config_dir = pathlib.Path(home) / ".config" / "rclone"

    xdg_config = None
    if xdg_config_dir is not None:
        xdg_config = xdg_config_dir / CONFIG_FILE_NAME
        if xdg_config.exists():
            return xdg_config

    home_config = None
    if home:
        home_config = pathlib.Path(home) / HIDDEN_CONFIG_FILE_NAME
        if home_config.exists():
            return home_config

    if xdg_config is not None:
        try:
            xdg_config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            output.annotate(
                "Could not create {}: {}".format(xdg_config_dir, e), debug=True
            )
        else:
            return xdg_config

    if home_config is not None:
        return home_config

    output.error(
        "Couldn't find home directory or read HOME or XDG_CONFIG_HOME "
        "environment variables."
    )
    output.error("Defaulting to storing config in current directory.")
    output.error("Use --config to work around.")
    return pathlib.Path(HIDDEN_CONFIG_FILE_NAME)


def make_cache_dir(
    environ: Optional[Mapping[str, str]] = None, platform: str = sys.platform
) -> pathlib.Path:
    """Return the cache directory. It is not created.

    Windows uses %LOCALAPPDATA%, macOS ~/Library/Caches and everything
    else $XDG_CACHE_HOME or ~/.cache. The temporary directory is used
    when none of these is known.

    """
    if environ is None:
        environ = os.environ
    cache_dir = None
    if platform.startswith("win"):
        cache_dir = environ.get("LOCALAPPDATA")
    elif platform == "darwin":
        if environ.get("HOME"):
            cache_dir = os.path.join(environ["HOME"], "Library", "Caches")
    else:
        cache_dir = environ.get("XDG_CACHE_HOME")
        if not cache_dir and environ.get("HOME"):
            cache_dir = os.path.join(environ["HOME"], ".cache")
    if not cache_dir:
        cache_dir = tempfile.gettempdir()
    return pathlib.Path(cache_dir) / "rclone"


def is_drive_letter(name: str) -> bool:
    return len(name) == 1 and name.isascii() and name.isalpha()


def check_remote_name(name: str) -> str:
    """Validate a name for a new remote and return it."""
    if name == "":
        raise InvalidRemoteName.from_context(name, "Can't use empty name.")
    if is_drive_letter(name):
        raise InvalidRemoteName.from_context(
            name,
            "Can't use {!r} as it can be confused with a drive letter.".format(
                name
            ),
        )
    match = REMOTE_MATCHER.match(name + ":")
    if match is None or match.group(1) != name:
        raise InvalidRemoteName.from_context(
            name,
            "Can't use {!r} as it has invalid characters in it.".format(name),
        )
    return name


def pairs(key_values):
    """Turn a flat [key, value, key, value, ...] list into pairs."""
    return list(zip(key_values[::2], key_values[1::2]))
