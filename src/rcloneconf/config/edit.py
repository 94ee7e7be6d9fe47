"""Interactively edit the configuration.

Both editors are small state machines. The transition tables below are
plain data and `transition()` is a pure function; the editor classes carry
out the actions the tables name and do all the prompting through the
session's terminal.

"""

import base64
import enum
import secrets
from typing import Optional, Tuple

from rcloneconf import ValidationError
from rcloneconf.backends import Option
from rcloneconf.config import manage
from rcloneconf.utils import check_remote_name


class State(enum.Enum):
    BROWSE = "browse"
    CHOOSE_TYPE = "choose_type"
    CONFIGURE_OPTIONS = "configure_options"
    BACKEND_CALLBACK = "backend_callback"
    CONFIRM = "confirm"
    DONE = "done"


class PasswordState(enum.Enum):
    UNENCRYPTED = "unencrypted"
    ENCRYPTED = "encrypted"
    DONE = "done"


BROWSE_MENU = [
    "eEdit existing remote",
    "nNew remote",
    "dDelete remote",
    "rRename remote",
    "cCopy remote",
    "sSet configuration password",
    "qQuit config",
]
# New remote plus the last two entries.
EMPTY_BROWSE_MENU = BROWSE_MENU[1:2] + BROWSE_MENU[-2:]
CONFIRM_MENU = ["yYes this is OK", "eEdit this remote", "dDelete this remote"]

UNENCRYPTED_MENU = ["aAdd Password", "qQuit to main menu"]
ENCRYPTED_MENU = [
    "cChange Password",
    "uUnencrypt configuration",
    "qQuit to main menu",
]

# (state, choice) -> (next state, action)
TRANSITIONS = {
    (State.BROWSE, "e"): (State.CONFIGURE_OPTIONS, "edit_existing"),
    (State.BROWSE, "n"): (State.CHOOSE_TYPE, "start_new"),
    (State.BROWSE, "d"): (State.BROWSE, "delete_remote"),
    (State.BROWSE, "r"): (State.BROWSE, "rename_remote"),
    (State.BROWSE, "c"): (State.BROWSE, "copy_remote"),
    (State.BROWSE, "s"): (State.BROWSE, "set_password"),
    (State.BROWSE, "q"): (State.DONE, None),
    (State.CHOOSE_TYPE, None): (State.CONFIGURE_OPTIONS, None),
    (State.CONFIGURE_OPTIONS, None): (State.BACKEND_CALLBACK, None),
    (State.BACKEND_CALLBACK, None): (State.CONFIRM, None),
    (State.CONFIRM, "y"): (State.BROWSE, "save"),
    (State.CONFIRM, "e"): (State.CONFIGURE_OPTIONS, "edit_again"),
    (State.CONFIRM, "d"): (State.BROWSE, "delete_current"),
}

PASSWORD_TRANSITIONS = {
    (PasswordState.UNENCRYPTED, "a"): (PasswordState.ENCRYPTED, "add"),
    (PasswordState.UNENCRYPTED, "q"): (PasswordState.DONE, None),
    (PasswordState.ENCRYPTED, "c"): (PasswordState.ENCRYPTED, "change"),
    (PasswordState.ENCRYPTED, "u"): (PasswordState.UNENCRYPTED, "unencrypt"),
    (PasswordState.ENCRYPTED, "q"): (PasswordState.DONE, None),
}


def transition(
    state, choice=None, table=TRANSITIONS
) -> Tuple[enum.Enum, Optional[str]]:
    try:
        return table[state, choice]
    except KeyError:
        raise ValueError(
            "unknown choice `{}` in state `{}`".format(choice, state.value)
        )


def generate_password(bits: int) -> str:
    """Random password with `bits` of entropy, URL-safe base64."""
    nbytes = (bits + 7) // 8
    password = secrets.token_bytes(nbytes)
    return base64.urlsafe_b64encode(password).rstrip(b"=").decode("ascii")


def choose_option(session, option: Option) -> str:
    """Ask for the value of `option`. Passwords are returned obscured."""
    terminal = session.terminal
    terminal.write(option.help)
    if option.is_password:
        actions = ["yYes type in my own password", "gGenerate random password"]
        if option.optional:
            actions.append("nNo leave this optional password blank")
        choice = terminal.command(actions)
        if choice == "n":
            return ""
        if choice == "y":
            password = terminal.change_password("the")
        else:
            while True:
                terminal.write("Password strength in bits.")
                terminal.write("64 is just about memorable")
                terminal.write("128 is secure")
                terminal.write("1024 is the maximum")
                bits = terminal.choose_number("Bits", 64, 1024)
                password = generate_password(bits)
                terminal.write("Your password is: {}".format(password))
                terminal.write("Use this password?")
                if terminal.confirm():
                    break
        return session.obscurer.obscure(password)
    if option.examples:
        values = [example.value for example in option.examples]
        helps = [example.help for example in option.examples]
        return terminal.choose(option.name, values, helps, new_ok=True)
    return terminal.read_line("{}> ".format(option.name))


def new_remote_name(terminal) -> str:
    """Ask for a name for a new remote until a valid one is given."""
    while True:
        name = terminal.read_line("name> ")
        try:
            return check_remote_name(name)
        except ValidationError as e:
            terminal.write(str(e))


def choose_remote(session) -> str:
    remotes = sorted(session.store.section_list())
    return session.terminal.choose("remote", remotes, None, new_ok=False)


class PasswordEditor(object):
    """Add, change or remove the configuration password.

    Every change is saved right away.

    """

    def __init__(self, session):
        self.session = session
        self.terminal = session.terminal
        if session.encrypted:
            self.state = PasswordState.ENCRYPTED
        else:
            self.state = PasswordState.UNENCRYPTED

    def main(self):
        while self.state is not PasswordState.DONE:
            self.step()

    def step(self):
        if self.state is PasswordState.ENCRYPTED:
            self.terminal.write("Your configuration is encrypted.")
            menu = ENCRYPTED_MENU
        else:
            self.terminal.write("Your configuration is not encrypted.")
            self.terminal.write(
                "If you add a password, you will protect your login "
                "information to cloud services."
            )
            menu = UNENCRYPTED_MENU
        choice = self.terminal.command(menu)
        self.state, action = transition(
            self.state, choice, PASSWORD_TRANSITIONS
        )
        if action:
            getattr(self, action)()

    def add(self):
        self.session.change_password()
        self.session.save()
        self.terminal.write("Password set")

    def change(self):
        self.session.change_password()
        self.session.save()
        self.terminal.write("Password changed")

    def unencrypt(self):
        self.session.clear_password()
        self.session.save()


class RemoteEditor(object):
    """The interactive remote editor (`rcloneconf config`)."""

    def __init__(self, session):
        self.session = session
        self.terminal = session.terminal
        self.state = State.BROWSE
        self.name: Optional[str] = None
        self.editing = False

    @property
    def store(self):
        return self.session.store

    def main(self):
        while self.state is not State.DONE:
            try:
                self.step()
            except ValidationError as e:
                self.terminal.write()
                self.terminal.write("An error occurred: {}".format(e))
                self.terminal.write()
                self.state = State.BROWSE

    def step(self):
        handler = getattr(self, "on_" + self.state.value)
        choice = handler()
        self.state, action = transition(self.state, choice)
        if action:
            getattr(self, action)()

    # States

    def on_browse(self):
        if self.store.section_list():
            self.terminal.write("Current remotes:")
            self.terminal.write()
            manage.show_remotes(self.session)
            self.terminal.write()
            menu = BROWSE_MENU
        else:
            self.terminal.write("No remotes found - make a new one")
            menu = EMPTY_BROWSE_MENU
        return self.terminal.command(menu)

    def on_choose_type(self):
        option = self.session.registry.type_option()
        self.terminal.write(option.help)
        new_type = self.terminal.choose(
            option.name,
            [example.value for example in option.examples],
            [example.help for example in option.examples],
            new_ok=False,
        )
        self.store.set(self.name, "type", new_type)

    def on_configure_options(self):
        backend = manage.must_find_by_name(self.session, self.name)
        if self.editing:
            manage.show_remote(self.session, self.name)
            self.terminal.write("Edit remote")
        for option in backend.options:
            if self.editing:
                value = self.store.get(self.name, option.name)
                self.terminal.write(
                    "Value {!r} = {!r}".format(option.name, value)
                )
                self.terminal.write("Edit? (y/n)>")
                if not self.terminal.confirm():
                    continue
            self.store.set(
                self.name, option.name, choose_option(self.session, option)
            )

    def on_backend_callback(self):
        manage.remote_config(self.session, self.name)

    def on_confirm(self):
        manage.show_remote(self.session, self.name)
        return self.terminal.command(CONFIRM_MENU)

    # Actions

    def edit_existing(self):
        self.name = choose_remote(self.session)
        self.editing = True

    def start_new(self):
        self.name = new_remote_name(self.terminal)
        self.editing = False

    def edit_again(self):
        self.editing = True

    def save(self):
        self.session.save()

    def delete_current(self):
        self.store.delete_section(self.name)
        self.session.save()

    def delete_remote(self):
        manage.delete_remote(self.session, choose_remote(self.session))

    def rename_remote(self):
        name = choose_remote(self.session)
        self.terminal.write("Enter new name for {!r} remote.".format(name))
        manage.rename_remote(self.session, name, new_remote_name(self.terminal))

    def copy_remote(self):
        name = choose_remote(self.session)
        self.terminal.write("Enter name for copy of {!r} remote.".format(name))
        manage.copy_remote(self.session, name, new_remote_name(self.terminal))

    def set_password(self):
        PasswordEditor(self.session).main()


def main(session, **kw):
    """Interactive configuration editor."""
    RemoteEditor(session).main()


def password_main(session, **kw):
    """Interactive configuration password editor."""
    PasswordEditor(session).main()
