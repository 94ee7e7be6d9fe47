import json
from typing import List

import yaml

from rcloneconf import KeyValueError, MissingRemote
from rcloneconf._output import output
from rcloneconf.backends import Backend
from rcloneconf.config import (
    CONFIG_AUTOMATIC,
    CONFIG_CLIENT_ID,
    CONFIG_CLIENT_SECRET,
)
from rcloneconf.utils import check_remote_name, make_cache_dir, pairs

AUTHORIZE_REMOTE = "**temp-fs**"


def must_find_by_name(session, name: str) -> Backend:
    """Return the backend of remote `name`."""
    backend_type = session.store.get(name, "type")
    if backend_type == "":
        raise MissingRemote.from_context(
            name, "Couldn't find type of fs for {!r}".format(name)
        )
    return session.registry.must_find(backend_type)


def show_remotes(session):
    remotes = sorted(session.store.section_list())
    if not remotes:
        return
    print("{:<20} {}".format("Name", "Type"))
    print("{:<20} {}".format("====", "===="))
    for remote in remotes:
        print("{:<20} {}".format(remote, session.store.get(remote, "type")))


def show_remote(session, name: str):
    print("--------------------")
    print("[{}]".format(name))
    backend = session.registry.find(session.store.get(name, "type"))
    for key in session.store.keys(name):
        option = backend.option(key) if backend is not None else None
        value = session.store.get(name, key)
        if option is not None and option.is_password and value != "":
            print("{} = *** ENCRYPTED ***".format(key))
        else:
            print("{} = {}".format(key, value))
    print("--------------------")


def show_config(session, **kw):
    """Print the (unencrypted) configuration."""
    text = str(session.store)
    if text == "":
        text = "; empty config\n"
    print(text, end="")


def show_config_location(session, **kw):
    if not session.path.exists():
        print(
            "Configuration file doesn't exist, "
            "but rcloneconf will use this path:"
        )
    else:
        print("Configuration file is stored at:")
    print(session.path)
    output.annotate("Cache directory: {}".format(make_cache_dir()), debug=True)


def dump(session, yaml_format=False, **kw):
    """Print all remotes with their (effective) values."""
    data = session.store.as_dict()
    if yaml_format:
        print(yaml.safe_dump(data, default_flow_style=False), end="")
    else:
        print(json.dumps(data, indent=4))


def list_providers(session, **kw):
    """Print all backends and their options as JSON."""
    print(json.dumps(session.registry.as_list(), indent=4))


def remote_config(session, name: str):
    """Run the backend specific setup for remote `name`, if any."""
    print("Remote config")
    backend = must_find_by_name(session, name)
    if backend.config is not None:
        backend.config(session, name)


def check_key_values(key_values: List[str]):
    if len(key_values) % 2 != 0:
        raise KeyValueError.from_context(len(key_values))


def update_remote(session, name: str, key_values: List[str], **kw):
    """Add key/value pairs to remote `name` and save."""
    check_key_values(key_values)
    if name not in session.store:
        raise MissingRemote.from_context(
            name, "Remote {!r} not found".format(name)
        )
    must_find_by_name(session, name)
    for key, value in pairs(key_values):
        session.store.set(name, key, value)
    remote_config(session, name)
    show_remote(session, name)
    session.save()


def create_remote(
    session, name: str, provider: str, key_values: List[str], **kw
):
    """Create remote `name` of type `provider`, replacing an existing one."""
    check_remote_name(name)
    check_key_values(key_values)
    session.registry.must_find(provider)
    session.terminal.auto_confirm = True
    session.store.delete_section(name)
    session.store.set(name, "type", provider)
    session.store.set(name, CONFIG_AUTOMATIC, "yes")
    for key, value in pairs(key_values):
        session.store.set(name, key, value)
    remote_config(session, name)
    show_remote(session, name)
    session.save()


def password_remote(session, name: str, key_values: List[str], **kw):
    """Obscure and store a single password value of remote `name`."""
    if len(key_values) != 2:
        raise KeyValueError.from_context(len(key_values))
    if name not in session.store:
        raise MissingRemote.from_context(
            name, "Remote {!r} not found".format(name)
        )
    key, password = key_values
    session.terminal.auto_confirm = True
    session.store.set(name, key, session.obscurer.obscure(password))
    remote_config(session, name)
    show_remote(session, name)
    session.save()


def delete_remote(session, name: str, **kw):
    session.store.delete_section(name)
    session.save()


def copy_remote(session, name: str, new_name: str, **kw):
    """Copy all keys of remote `name` to `new_name` and save."""
    if name not in session.store:
        raise MissingRemote.from_context(
            name, "Remote {!r} not found".format(name)
        )
    check_remote_name(new_name)
    session.store.copy_section(name, new_name)
    session.save()


def rename_remote(session, name: str, new_name: str, **kw):
    """Move all keys of remote `name` to `new_name` and save."""
    if name not in session.store:
        raise MissingRemote.from_context(
            name, "Remote {!r} not found".format(name)
        )
    check_remote_name(new_name)
    if name == new_name:
        return
    session.store.copy_section(name, new_name)
    session.store.delete_section(name)
    session.save()


def authorize(session, provider: str, client: List[str], **kw):
    """Run the interactive setup of a backend without keeping a remote.

    Used to authorize a backend on a machine with a browser on behalf of
    a headless one. `client` is empty or [client_id, client_secret].

    """
    if len(client) not in (0, 2):
        raise KeyValueError.from_context(len(client) + 1)
    backend = session.registry.must_find(provider)
    if backend.config is None:
        raise MissingRemote.from_context(
            provider, "Can't authorize fs {!r}".format(provider)
        )
    name = AUTHORIZE_REMOTE
    try:
        session.store.set(name, CONFIG_AUTOMATIC, "yes")
        if client:
            session.store.set(name, CONFIG_CLIENT_ID, client[0])
            session.store.set(name, CONFIG_CLIENT_SECRET, client[1])
        backend.config(session, name)
    finally:
        delete_remote(session, name)
