"""Package and protocol version numbers."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("plugin-protocol")
except PackageNotFoundError:
    # running from a source checkout
    __version__ = "0.0.0-dev"

# Newest integration protocol version the decoders understand
__protocol_version__ = 4
