import argparse
import sys
import textwrap
from typing import Optional

import rcloneconf
import rcloneconf.config.edit
import rcloneconf.config.encryption
import rcloneconf.config.manage
from rcloneconf._output import TerminalBackend, output
from rcloneconf.log import setup_logging
from rcloneconf.session import Session
from rcloneconf.terminal import Terminal
from rcloneconf.utils import make_config_path


def main(args: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(
        description="rcloneconf v{}: manage (encrypted) remote "
        "configurations".format(rcloneconf.__version__),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.set_defaults(func=parser.print_usage)

    parser.add_argument(
        "-d", "--debug", action="store_true", help="Enable debug mode."
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Config file (default: $XDG_CONFIG_HOME/rclone/rclone.conf "
        "or ~/.rclone.conf)",
    )
    parser.add_argument(
        "--ask-password",
        dest="ask_password",
        action="store_true",
        default=True,
        help="Prompt for the configuration password if needed.",
    )
    parser.add_argument(
        "--no-ask-password",
        dest="ask_password",
        action="store_false",
        help="Never prompt for the configuration password. "
        "Use RCLONE_CONFIG_PASS instead.",
    )
    parser.add_argument(
        "--auto-confirm",
        action="store_true",
        help="Answer yes to all confirmation questions.",
    )

    subparsers = parser.add_subparsers()

    p = subparsers.add_parser(
        "config",
        help=textwrap.dedent(
            """
            Enter an interactive configuration session to create, edit,
            rename, copy and delete remotes and to set the configuration
            password."""
        ),
    )
    p.set_defaults(func=rcloneconf.config.edit.main)

    p = subparsers.add_parser(
        "set-password",
        help="Add, change or remove the configuration password.",
    )
    p.set_defaults(func=rcloneconf.config.edit.password_main)

    p = subparsers.add_parser(
        "show", help="Print the (decrypted) config file, or one remote."
    )
    p.add_argument("name", nargs="?", default=None, help="Remote to show.")
    p.set_defaults(func=show)

    p = subparsers.add_parser(
        "file", help="Show the path of the config file in use."
    )
    p.set_defaults(func=rcloneconf.config.manage.show_config_location)

    p = subparsers.add_parser(
        "dump", help="Dump all remotes with their values."
    )
    p.add_argument(
        "--yaml",
        dest="yaml_format",
        action="store_true",
        help="Dump as YAML instead of JSON.",
    )
    p.set_defaults(func=rcloneconf.config.manage.dump)

    p = subparsers.add_parser(
        "providers", help="List all backends and their options as JSON."
    )
    p.set_defaults(func=rcloneconf.config.manage.list_providers)

    p = subparsers.add_parser(
        "create", help="Create a new remote with name, type and options."
    )
    p.add_argument("name", help="Name of the remote.")
    p.add_argument("provider", metavar="type", help="Backend type.")
    p.add_argument("key_values", nargs="*", metavar="key value")
    p.set_defaults(func=rcloneconf.config.manage.create_remote)

    p = subparsers.add_parser(
        "update", help="Update options of an existing remote."
    )
    p.add_argument("name", help="Name of the remote.")
    p.add_argument("key_values", nargs="*", metavar="key value")
    p.set_defaults(func=rcloneconf.config.manage.update_remote)

    p = subparsers.add_parser(
        "password", help="Store an obscured password for a remote."
    )
    p.add_argument("name", help="Name of the remote.")
    p.add_argument("key_values", nargs="*", metavar="key password")
    p.set_defaults(func=rcloneconf.config.manage.password_remote)

    p = subparsers.add_parser("delete", help="Delete an existing remote.")
    p.add_argument("name", help="Name of the remote.")
    p.set_defaults(func=rcloneconf.config.manage.delete_remote)

    p = subparsers.add_parser("rename", help="Rename an existing remote.")
    p.add_argument("name", help="Name of the remote.")
    p.add_argument("new_name", help="New name.")
    p.set_defaults(func=rcloneconf.config.manage.rename_remote)

    p = subparsers.add_parser("copy", help="Copy an existing remote.")
    p.add_argument("name", help="Name of the remote.")
    p.add_argument("new_name", help="Name of the copy.")
    p.set_defaults(func=rcloneconf.config.manage.copy_remote)

    p = subparsers.add_parser(
        "authorize",
        help="Run the interactive setup of a backend on this machine "
        "on behalf of another one.",
    )
    p.add_argument("provider", metavar="type", help="Backend type.")
    p.add_argument(
        "client",
        nargs="*",
        metavar="client_id client_secret",
        help="Optional client id and secret.",
    )
    p.set_defaults(func=rcloneconf.config.manage.authorize)

    args = parser.parse_args(args)

    # Consume global arguments
    output.enable_debug = args.debug
    rcloneconf.config.encryption.debug = args.debug

    if args.func.__name__ == "print_usage":
        args.func()
        sys.exit(1)

    output.backend = TerminalBackend()
    setup_logging(debug=args.debug)

    func_args = dict(args._get_kwargs())
    func = func_args.pop("func")
    del func_args["debug"]
    config = func_args.pop("config")
    ask_password = func_args.pop("ask_password")
    auto_confirm = func_args.pop("auto_confirm")

    session = Session(
        config if config else make_config_path(),
        terminal=Terminal(auto_confirm=auto_confirm),
        ask_password=ask_password,
    )
    try:
        session.load()
        return func(session, **func_args)
    except rcloneconf.ReportingException as e:
        e.report()
        sys.exit(1)
    except (EOFError, KeyboardInterrupt):
        print(file=sys.stderr)
        sys.exit(1)


def show(session, name=None, **kw):
    if name is None:
        rcloneconf.config.manage.show_config(session)
        return
    if name not in session.store:
        raise rcloneconf.MissingRemote.from_context(
            name, "Remote {!r} not found".format(name)
        )
    rcloneconf.config.manage.show_remote(session, name)
