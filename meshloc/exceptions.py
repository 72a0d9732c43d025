"""Exception hierarchy for meshloc."""


class MeshlocError(Exception):
    """Base class for errors raised by meshloc."""


class ConfigError(MeshlocError, ValueError):
    """Invalid engine configuration."""


class TransportError(MeshlocError):
    """A message could not be handed to the mesh transport."""
