import argparse
import sys

from environs import EnvError

from api import MangoOfficeAPI
from config import get_credentials, setup_logging, logger
from errors import MangoAPIError
from handlers import get_period_calls
from utils import PERIODS, period_range, format_call_details


def build_parser():
    parser = argparse.ArgumentParser(description="Mango Office VPBX call statistics")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for period in PERIODS:
        subparsers.add_parser(period, help=f"Fetch {period}'s calls")

    user_parser = subparsers.add_parser("user", help="Look up a user by extension")
    user_parser.add_argument("extension")
    return parser


def print_user(user):
    print(f"{user.name} <{user.email}>")
    print(f"Department: {user.department}")
    print(f"Position: {user.position}")
    print(f"Extension: {user.extension}, outgoing line: {user.outgoing_line}")
    for number in user.numbers:
        print(f"  {number.order}. {number.number} ({number.protocol}, {number.wait_sec} sec, {number.status})")


def main(argv=None, api=None):
    """
    Run one command

    Args:
        argv (list): Command line arguments (defaults to sys.argv)
        api (MangoOfficeAPI): Client to use (built from the environment when omitted)

    Returns:
        int: Exit code
    """
    args = build_parser().parse_args(argv)

    try:
        if api is None:
            api_key, api_salt = get_credentials()
            api = MangoOfficeAPI(api_key, api_salt)

        if args.command == "user":
            print_user(api.get_user(args.extension))
            return 0

        start_time, end_time = period_range(args.command)
        calls = get_period_calls(api, start_time, end_time, args.command)
        for call in calls:
            print(format_call_details(call))
            print()
        print(f"Total: {len(calls)} calls")
        return 0
    except EnvError as e:
        logger.error(f"Missing configuration: {e}")
        return 1
    except MangoAPIError as e:
        logger.error(f"Mango Office API error: {e}")
        return 1


def run():
    setup_logging()
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logger.info("Interrupted")
        sys.exit(130)


if __name__ == "__main__":
    run()
