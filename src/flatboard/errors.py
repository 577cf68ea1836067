class FlatboardError(Exception):
    """
    Base class for errors raised while building a keyboard.
    """


class ConfigurationError(FlatboardError, ValueError):
    """
    The keyboard configuration is missing or malformed.
    """


class OutlineError(FlatboardError, ValueError):
    """
    An outline could not be constructed from the given key placements.
    """
