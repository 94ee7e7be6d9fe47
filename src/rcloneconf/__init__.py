import os.path

from ._output import output

with open(os.path.dirname(__file__) + "/version.txt") as f:
    __version__ = f.read().strip()


class ReportingException(Exception):
    """Exceptions that support user-readable reporting."""

    def __str__(self):
        raise NotImplementedError()

    def report(self):
        raise NotImplementedError()


class ValidationError(ReportingException, ValueError):
    """User supplied input was rejected. The store was not modified."""


class PasswordError(ValidationError):
    """A configuration password could not be used."""

    message: str

    @classmethod
    def from_context(cls, message):
        self = cls()
        self.message = message
        return self

    def __str__(self):
        return self.message

    def report(self):
        output.error("Bad password: {}".format(self.message))


class InvalidRemoteName(ValidationError):
    """A remote name can not be used as a section name."""

    name: str
    reason: str

    @classmethod
    def from_context(cls, name, reason):
        self = cls()
        self.name = name
        self.reason = reason
        return self

    def __str__(self):
        return self.reason

    def report(self):
        output.error("Invalid remote name")
        output.tabular("remote", repr(self.name), red=True)
        output.tabular("message", self.reason)


class KeyValueError(ValidationError):
    """Key/value arguments did not come in pairs."""

    count: int

    @classmethod
    def from_context(cls, count):
        self = cls()
        self.count = count
        return self

    def __str__(self):
        return "found key without value ({} arguments)".format(self.count)

    def report(self):
        output.error(str(self))


class UnknownBackend(ValidationError):
    """No backend is registered under the requested type."""

    backend: str

    @classmethod
    def from_context(cls, backend):
        self = cls()
        self.backend = backend
        return self

    def __str__(self):
        return 'Didn\'t find backend called "{}"'.format(self.backend)

    def report(self):
        output.error(str(self))


class MissingRemote(ValidationError):
    """A remote has no section or no usable type."""

    name: str
    message: str

    @classmethod
    def from_context(cls, name, message):
        self = cls()
        self.name = name
        self.message = message
        return self

    def __str__(self):
        return "{}: {}".format(self.name, self.message)

    def report(self):
        output.error(self.message)
        output.tabular("remote", self.name, red=True)


class UnsupportedEncryption(ReportingException):
    """The configuration was encrypted with an unknown format version."""

    marker: str

    @classmethod
    def from_context(cls, marker):
        self = cls()
        self.marker = marker
        return self

    def __str__(self):
        return (
            "unsupported configuration encryption `{}` - "
            "update rcloneconf for support".format(self.marker)
        )

    def report(self):
        output.error("Unsupported configuration encryption")
        output.tabular("marker", self.marker, red=True)
        output.tabular("hint", "update rcloneconf for support")


class MalformedConfig(ReportingException):
    """The configuration file content could not be parsed."""

    path: str
    message: str

    @classmethod
    def from_context(cls, path, message):
        self = cls()
        self.path = str(path)
        self.message = message
        return self

    def __str__(self):
        return "Failed to load config file {}: {}".format(
            self.path, self.message
        )

    def report(self):
        output.error("Failed to load config file")
        output.tabular("file", self.path, red=True)
        output.tabular("message", self.message, separator=":\n")


class PasswordRequired(ReportingException):
    """An encrypted configuration can not be opened without asking."""

    variable: str

    @classmethod
    def from_context(cls, variable):
        self = cls()
        self.variable = variable
        return self

    def __str__(self):
        return (
            "unable to decrypt configuration and not allowed to ask for "
            "password - set {} to your configuration password".format(
                self.variable
            )
        )

    def report(self):
        output.error("Need password to decrypt configuration")
        output.tabular("hint", "set {}".format(self.variable))


class PersistenceError(ReportingException):
    """Writing the configuration file failed."""

    path: str
    step: str
    error: str

    @classmethod
    def from_context(cls, path, step, error):
        self = cls()
        self.path = str(path)
        self.step = step
        self.error = str(error)
        return self

    def __str__(self):
        return "Failed to {} for {}: {}".format(self.step, self.path, self.error)

    def report(self):
        output.error("Failed to save config file")
        output.tabular("file", self.path, red=True)
        output.tabular("step", self.step)
        output.tabular("message", self.error, separator=":\n")


class ObscureError(ValidationError):
    """A stored value could not be revealed."""

    message: str

    @classmethod
    def from_context(cls, message):
        self = cls()
        self.message = message
        return self

    def __str__(self):
        return self.message

    def report(self):
        output.error(self.message)
