"""Player client for the mniAM game: AMCOM packet protocol, payloads, strategy and TCP client."""

__version__ = "0.1.0"
__all__ = ["protocol", "packets", "strategy", "client"]