import os
import logging
from logging.handlers import RotatingFileHandler
from environs import Env

env = Env()
env.read_env()  # Pick up a local .env file if there is one

logger = logging.getLogger("MangoOffice_Client")

# API configuration
API_URL = env.str("MANGO_API_URL", "https://app.mango-office.ru/vpbx").rstrip("/")
USERS_PATH = "/config/users/request"
STATS_REQUEST_PATH = "/stats/request"
STATS_RESULT_PATH = "/stats/result"
REQUEST_TIMEOUT = env.int("MANGO_REQUEST_TIMEOUT", 30)

# Result polling (used by the runner, never by the client itself)
STATS_RETRY_DELAY = env.int("MANGO_STATS_RETRY_DELAY", 5)
STATS_MAX_ATTEMPTS = env.int("MANGO_STATS_MAX_ATTEMPTS", 24)

# Logging
LOG_LEVEL = env.str("LOG_LEVEL", "INFO")
LOG_DIRECTORY = env.str("LOG_DIRECTORY", "logs")
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_credentials():
    """
    Read the VPBX credentials from the environment

    Keys are issued on https://lk.mango-office.ru/api-vpbx/settings

    Returns:
        tuple: (api_key, api_salt)

    Raises:
        environs.EnvError: If either variable is missing
    """
    return env.str("MANGO_VPBX_API_KEY"), env.str("MANGO_VPBX_API_SALT")


def setup_logging(level=LOG_LEVEL, log_directory=LOG_DIRECTORY):
    """
    Configure console and rotating file logging for the runner

    Args:
        level (str): Log level name
        log_directory (str): Directory for the log file
    """
    os.makedirs(log_directory, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(),
            RotatingFileHandler(
                os.path.join(log_directory, "mango.log"),
                maxBytes=10485760,  # 10MB
                backupCount=5
            )
        ]
    )
