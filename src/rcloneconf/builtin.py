"""Backends shipped with rcloneconf, registered through entry points."""

from rcloneconf.backends import Backend, Option, OptionExample

local = Backend(
    "local",
    description="Local Disk",
    options=[
        Option(
            "nounc",
            help="Disable long file names on Windows.",
            optional=True,
            examples=[OptionExample("true", "Disables long file names")],
        ),
    ],
)

alias = Backend(
    "alias",
    description="Alias for an existing remote",
    options=[
        Option(
            "remote",
            help=(
                "Remote or path to alias.\n"
                'Can be "myremote:path/to/dir", "myremote:bucket", '
                '"myremote:" or "/local/path".'
            ),
        ),
    ],
)

sftp = Backend(
    "sftp",
    description="SSH/SFTP Connection",
    options=[
        Option(
            "host",
            help="SSH host to connect to",
            examples=[OptionExample("example.com", "Connect to example.com")],
        ),
        Option("user", help="SSH username, leave blank for current username."),
        Option("port", help="SSH port, leave blank to use default (22)"),
        Option(
            "pass",
            help="SSH password, leave blank to use ssh-agent.",
            is_password=True,
            optional=True,
        ),
        Option(
            "key_file",
            help="Path to unencrypted PEM-encoded private key file, "
            "leave blank to use ssh-agent.",
            optional=True,
        ),
    ],
)
