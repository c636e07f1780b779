"""
Command-line argument parsing for the PAPI proxy.

The proxy has no config file. Partner credentials, the token and partner
URLs, the internal shared secret and the feature switches are read only from
the environment (see config/config_parser.py). The command line can override
the bind address and port (HOST, PORT) and turn on debug logging.
"""

import argparse

from version import get_version_string


def parse_arguments(argv: list[str] | None = None):
    """Parse command-line arguments for the proxy server.

    Returns:
        argparse.Namespace: Parsed command-line arguments with the following attributes:
            - debug (bool): Enable debug logging
            - port (int | None): Port override for the PORT variable
            - host (str | None): Bind address override for the HOST variable
    """
    version_string = get_version_string()
    parser = argparse.ArgumentParser(
        description=f"Internal relay for the partner API - {version_string}",
        epilog="Configuration is read from environment variables, see README.",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {version_string}",
        help="Show version information and exit",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug mode")
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=None,
        help="Port number to run the server on (overrides PORT)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Address to bind to (overrides HOST)",
    )
    return parser.parse_args(argv)
