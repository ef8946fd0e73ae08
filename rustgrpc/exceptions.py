class UserProtoError(Exception):
    """Exception raised in case of a malformed user-provided proto file or
    plugin invocation."""
    pass


class ConfigurationError(UserProtoError):
    """
    Raised when the plugin parameter, or a file it points to (e.g. the crate
    mapping), cannot be used to generate code.
    """
    pass


class InternalGeneratorError(Exception):
    """
    Raised when the descriptor graph handed to us by protoc violates an
    invariant that protoc itself guarantees; i.e. a bug, not a user error.
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

    def __str__(self):
        return f"Internal error: {self.reason}"
