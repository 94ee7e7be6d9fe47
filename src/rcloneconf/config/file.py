"""Replace the configuration file without ever leaving a partial one."""

import os
import pathlib
import stat
import tempfile

from rcloneconf import PersistenceError
from rcloneconf._output import output

DEFAULT_MODE = 0o600


def backup_path(path: pathlib.Path) -> pathlib.Path:
    return path.with_name(path.name + ".old")


def target_mode(path: pathlib.Path) -> int:
    try:
        mode = stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        output.annotate(
            "Using default permissions for config file: {:o}".format(
                DEFAULT_MODE
            ),
            debug=True,
        )
        return DEFAULT_MODE
    if mode != DEFAULT_MODE:
        output.annotate(
            "Keeping previous permissions for config file: {:o}".format(mode),
            debug=True,
        )
    return mode


def attempt_copy_group(source: pathlib.Path, target: str):
    """Give `target` the group of `source`, if we are allowed to."""
    if not hasattr(os, "chown"):
        return
    try:
        group = os.stat(source).st_gid
        os.chown(target, -1, group)
    except OSError as e:
        output.annotate(
            "Couldn't copy group of {} to new config file: {}".format(
                source, e
            ),
            debug=True,
        )


def write_atomic(path: pathlib.Path, content: bytes):
    """Write `content` to `path` via a temporary file in the same directory.

    The previous file is moved to `<path>.old` right before the new file
    takes its place and removed afterwards. A crash between those two
    renames leaves only the backup behind.

    """
    path = pathlib.Path(path)
    directory = path.parent
    step = "create temp file for new config"
    temp_name = None
    try:
        fd, temp_name = tempfile.mkstemp(dir=str(directory), prefix=path.name)
        step = "write temp config file"
        with os.fdopen(fd, "wb") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        mode = target_mode(path)
        attempt_copy_group(path, temp_name)
        step = "set permissions on config file"
        os.chmod(temp_name, mode)

        old = backup_path(path)
        step = "move previous config to backup location"
        try:
            os.rename(path, old)
        except FileNotFoundError:
            pass
        step = "move newly written config to final location"
        os.rename(temp_name, path)
        step = "remove backup config file"
        try:
            os.remove(old)
        except FileNotFoundError:
            pass
    except OSError as e:
        raise PersistenceError.from_context(path, step, e) from e
    finally:
        if temp_name is not None:
            try:
                os.remove(temp_name)
            except FileNotFoundError:
                pass
