import logging
import os
# Re-export the log levels, so that clients can import them from this module.
from logging import CRITICAL, DEBUG, ERROR, INFO, WARNING  # noqa: F401
from typing import Optional

# Name of the environment variable holding the log level of the plugin.
ENVVAR_RUST_GRPC_LOGGING = 'RUST_GRPC_LOGGING'

# Create log formatter that we'll use with log handler.
formatter = logging.Formatter(
    '%(asctime)s %(levelname)s %(module)s:%(lineno)d: %(message)s'
)

# Create log handler and connect it to formatter.
# Note: we set the log level of the stream handler to be as verbose as
# possible: any message passed to the handler from the logger should get
# considered by the stream handler.
#
# NOTE: the handler writes to stderr; stdout carries the serialized
# `CodeGeneratorResponse` back to protoc and must never be logged to.
stream_handler = logging.StreamHandler()
stream_handler.setLevel(logging.DEBUG)
stream_handler.setFormatter(formatter)

# Create our logger and connect the stream handler.
#
# NOTE: setting the log level is deferred to the end of this module.
logger = logging.getLogger('rustgrpc')
logger.addHandler(stream_handler)

# NOTE: because we are adding our own handler we need to set
# `propagate = False` so that we don't print the logs more than once
# in the event an application that is using us sets up their own
# handler which they will do if they call `logging.basicConfig()`.
logger.propagate = False


def set_log_level(log_level: int) -> None:
    """ Set the log level globally for this process.

    This method should usually only be called from an application's `main` method.
    To set the log level for an individual package logger, use `logger.setLevel` instead.
    """
    global logger
    logger.setLevel(log_level)


def get_logger(name: Optional[str] = None, parent=None) -> logging.Logger:
    """ Get a named logger.

    If no name is given, return the plugin logger, else return a child logger
    of the plugin logger.
    """
    global logger
    parent = parent or logger
    return logger if name is None else parent.getChild(name)


# Initialize the log level for the plugin logger.
set_log_level(
    getattr(
        logging,
        os.environ.get(ENVVAR_RUST_GRPC_LOGGING, '').upper(), logging.INFO
    )
)
