class ModalKeyzError(Exception):
    """Base class for every error raised by modalkeyz"""


class ConfigError(ModalKeyzError, ValueError):
    """Missing or malformed start arguments or binding tree"""


class SessionActiveError(ModalKeyzError):
    """A session was started while another one is still active"""
