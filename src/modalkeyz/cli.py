import os
import sys

from argparse import ArgumentParser

from . import config_api, version
from .devices import device_table, open_devices
from .errors import ConfigError
from .input import main_loop
from .lib import logger
from .lib.logger import error, info


def parse_args(argv=None):
    parser = ArgumentParser(prog="modalkeyz", description=version.__description__)
    parser.add_argument("-c", "--config", dest="config", metavar="config.py",
                        help="use custom configuration file")
    parser.add_argument("-d", "--devices", dest="devices", metavar="device",
                        nargs="+", help="manually specify devices to read from")
    parser.add_argument("-w", "--watch", dest="watch", action="store_true",
                        help="watch for new keyboard devices to hot-plug")
    parser.add_argument("-v", "--verbose", dest="verbose", action="store_true",
                        help="increase debug logging")
    parser.add_argument("--list-devices", dest="list_devices", action="store_true",
                        help="list input devices")
    parser.add_argument("--version", dest="show_version", action="store_true",
                        help="show version")
    return parser.parse_args(argv)


def default_config_path():
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.expanduser("~/.config")
    return os.path.join(base, "modalkeyz", "config.py")


def main(argv=None):
    args = parse_args(argv)

    if args.show_version:
        print(f"{version.__name__} v{version.__version__}")
        return 0

    if args.list_devices:
        for line in device_table(open_devices()):
            print(line)
        return 0

    logger.VERBOSE = args.verbose

    config_path = args.config or default_config_path()
    if not os.path.exists(config_path):
        error(f"Config file not found: '{config_path}'")
        return 1

    info(f"{version.__name__} v{version.__version__}")
    info(f"Configuration file: {config_path}")
    try:
        config_api.load_config(config_path)
    except ConfigError as config_err:
        error(f"Invalid configuration: {config_err}")
        return 1

    main_loop(args.devices, args.watch)
    return 0


if __name__ == "__main__":
    sys.exit(main())
