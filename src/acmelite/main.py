"""acmelite command line: register the account, then request authorization."""
import argparse
import logging
import sys
from typing import List
from typing import Optional

import configargparse

import acmelite
from acmelite import constants
from acmelite import errors
from acmelite import log
from acmelite.client import ProtocolClient
from acmelite.configuration import ClientConfig

logger = logging.getLogger(__name__)


def flag_default(name):
    """Default value for CLI flag."""
    return constants.CLI_DEFAULTS[name]


def create_parser() -> configargparse.ArgParser:
    """Create parser."""
    parser = configargparse.ArgParser(
        description=__doc__,
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        args_for_setting_config_path=["-c", "--config"],
        auto_env_var_prefix=constants.ENV_VAR_PREFIX,
    )
    add = parser.add_argument

    add("--version", action="version", version="%(prog)s {0}".format(
        acmelite.__version__))
    add("-v", "--verbose", dest="verbose_count", action="count",
        default=flag_default("verbose_count"),
        help="This flag can be used multiple times to incrementally "
        "increase the verbosity of output, e.g. -vvv.")
    add("-q", "--quiet", action="store_true", default=flag_default("quiet"),
        help="Silence all output except errors.")
    add("-s", "--server-host", default=flag_default("server_host"),
        help="Authority host name.")
    add("--scheme", default=flag_default("scheme"), choices=("http", "https"),
        help="Protocol used to reach the authority.")
    add("--key-path", default=flag_default("key_path"),
        help="Account key file; generated on first use.")
    add("--rsa-key-size", type=int, default=flag_default("rsa_key_size"),
        help="Size of a newly generated account key.")
    add("--user-agent", default=flag_default("user_agent"))
    add("--timeout", type=int, default=flag_default("timeout"),
        help="Network timeout in seconds.")

    testing_group = parser.add_argument_group(
        "testing", description="The following flags are meant for "
        "testing purposes only! Do NOT change them, unless you "
        "really know what you're doing!")
    testing_group.add_argument(
        "--no-verify-ssl", action="store_true",
        default=flag_default("no_verify_ssl"),
        help="Disable verification of the authority's certificate.")

    add("hostname", help="Domain name to request authorization for.")
    return parser


def run(config: ClientConfig) -> Optional[str]:
    """Register, authorize ``config.hostname`` and print the challenge."""
    client = ProtocolClient.from_config(config)
    try:
        client.register()
        challb = client.new_authorization(config.hostname)
    except errors.Error as error:
        logger.debug('Handshake failed', exc_info=True)
        return str(error)
    finally:
        client.close()
    print(challb.json_dumps_pretty())
    return None


def main(cli_args: Optional[List[str]] = None) -> Optional[str]:
    """Command line argument parsing and main script execution.

    :returns: Error message, or ``None`` on success.

    """
    if cli_args is None:
        cli_args = sys.argv[1:]
    # note: arg parser internally handles --help (and exits afterwards)
    args = create_parser().parse_args(cli_args)
    try:
        config = ClientConfig(args)
    except errors.ConfigurationError as error:
        return str(error)
    log.setup_logging(config)
    return run(config)


if __name__ == "__main__":
    err_string = main()
    if err_string:
        logger.warning("Exiting with message %s", err_string)
    sys.exit(err_string)  # pragma: no cover
