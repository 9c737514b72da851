import time
import uuid
from datetime import datetime

from config import STATS_RETRY_DELAY, STATS_MAX_ATTEMPTS, logger
from errors import StatsNotReadyError
from utils import format_call_details


def collect_stats(api, date_from, date_to, request_id=None,
                  retry_delay=STATS_RETRY_DELAY, max_attempts=STATS_MAX_ATTEMPTS,
                  sleep=time.sleep):
    """
    Request a statistics export and poll until it is ready

    Args:
        api (MangoOfficeAPI): Client to use
        date_from (datetime|int): Period start
        date_to (datetime|int): Period end
        request_id (str): Correlation id (generated when omitted)
        retry_delay (int): Seconds to wait between polls
        max_attempts (int): Number of polls before giving up
        sleep (callable): Sleep function

    Returns:
        list: CallRecord objects

    Raises:
        StatsNotReadyError: If the export is still not ready after max_attempts
        MangoAPIError: Any other client error, unchanged
    """
    request_id = request_id or str(uuid.uuid4())
    key = api.request_stats_key(date_from, date_to, request_id)

    attempt = 0
    while True:
        attempt += 1
        try:
            return api.fetch_stats(key, request_id)
        except StatsNotReadyError:
            if attempt >= max_attempts:
                logger.error(f"Stats for key {key} not ready after {attempt} attempts")
                raise
            logger.info(f"Stats not ready (attempt {attempt}/{max_attempts}), retrying in {retry_delay} seconds")
            sleep(retry_delay)


def get_period_calls(api, start_time, end_time, period_name, **kwargs):
    """
    Get calls for a period and log each of them

    Args:
        api (MangoOfficeAPI): Client to use
        start_time (int): Start timestamp
        end_time (int): End timestamp
        period_name (str): Name of the period (e.g., "today", "month")
        **kwargs: Passed to collect_stats

    Returns:
        list: CallRecord objects
    """
    logger.info(f"Getting {period_name} calls from {datetime.fromtimestamp(start_time)} to {datetime.fromtimestamp(end_time)}")

    calls = collect_stats(api, start_time, end_time, **kwargs)
    if not calls:
        logger.info(f"No calls found for {period_name}")
        return calls

    logger.info(f"Found {len(calls)} calls for {period_name}")
    for call in calls:
        logger.debug(format_call_details(call))
    return calls
