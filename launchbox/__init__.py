"""
launchbox: container entrypoint that runs the `launch` application server
alongside the Caddy reverse proxy and tears both down as a unit.
"""

__version__ = "1.0.0"
