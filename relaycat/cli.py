"""
relaycat CLI - relay stdin/stdout over one TCP or UDP connection.
"""

import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from . import __version__
from .config import SessionConfig
from .modes import run
from .network.errors import RelaycatError

err_console = Console(stderr=True, highlight=False)
logger = logging.getLogger(__name__)

PORT_RANGE = click.IntRange(0, 65535)


def setup_logging(verbose: bool = False):
    """Set up logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[logging.StreamHandler()]
    )


def _fail(message: str, exit_code: int = 1):
    err_console.print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True)
    sys.exit(exit_code)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option('-l', '--listen', is_flag=True, help='Listen mode, for inbound connects')
@click.option('-p', '--port', type=PORT_RANGE, help='Local port number')
@click.option('-u', '--udp', is_flag=True, help='Use UDP instead of TCP')
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.argument('host', required=False)
@click.argument('target_port', metavar='PORT', type=PORT_RANGE, required=False)
@click.version_option(__version__, prog_name="relaycat")
def main(
    listen: bool,
    port: Optional[int],
    udp: bool,
    verbose: bool,
    host: Optional[str],
    target_port: Optional[int],
):
    """
    A simple netcat: relay stdin/stdout over one TCP or UDP connection.

    \b
    Examples:
      relaycat example.com 80       # TCP client
      relaycat -l -p 9001           # TCP server, one connection
      relaycat -u localhost 9002    # UDP client
      relaycat -l -u -p 9002        # UDP server
    """
    setup_logging(verbose)

    config = SessionConfig(
        listen=listen,
        udp=udp,
        host=host,
        port=port,
        target_port=target_port,
    )

    try:
        run(config)
    except RelaycatError as e:
        _fail(str(e), e.exit_code)
    except OSError as e:
        _fail(str(e))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
