import hashlib
import json
from datetime import datetime

import requests

from config import (
    API_URL, USERS_PATH, STATS_REQUEST_PATH, STATS_RESULT_PATH,
    REQUEST_TIMEOUT, logger
)
from errors import (
    TransportError, MalformedResponseError, StatsNotFoundError,
    StatsNotReadyError, ProviderError, UserNotFoundError
)
from models import User
from stats import decode_stats, stats_fields_param

STATS_RETRY_AFTER = 5  # seconds, recommended by the provider


def serialize_payload(payload):
    """
    Serialize a request payload to the JSON string that gets signed and sent

    Args:
        payload (dict): Request data

    Returns:
        str: Compact JSON, keys in insertion order
    """
    return json.dumps(payload, ensure_ascii=False, separators=(',', ':'))


def to_unix_time(value):
    """
    Convert a datetime or unix timestamp to integer seconds

    Args:
        value (datetime|int): Point in time

    Returns:
        int: Unix timestamp
    """
    if isinstance(value, datetime):
        return int(value.timestamp())
    return int(value)


class MangoOfficeAPI:
    """
    API client for Mango Office VPBX

    Holds only the credentials and connection settings; every call builds
    its own request, so one instance can be shared between callers.
    """
    def __init__(self, api_key, api_salt, api_url=API_URL, timeout=REQUEST_TIMEOUT):
        self._api_key = api_key
        self._api_salt = api_salt
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout

    def sign(self, json_payload):
        """
        Sign a serialized payload

        Args:
            json_payload (str): JSON string exactly as it will be sent

        Returns:
            str: Lowercase hex sha256 of api_key + json_payload + api_salt
        """
        raw = f"{self._api_key}{json_payload}{self._api_salt}"
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()

    def form_data(self, json_payload):
        """
        Build the form body for a serialized payload

        Args:
            json_payload (str): JSON string exactly as it will be sent

        Returns:
            dict: vpbx_api_key, sign and json fields
        """
        return {
            "vpbx_api_key": self._api_key,
            "sign": self.sign(json_payload),
            "json": json_payload,
        }

    def _post(self, path, payload):
        url = f"{self._api_url}{path}"
        json_payload = serialize_payload(payload)
        logger.debug(f"POST {url} json={json_payload}")
        try:
            response = requests.post(
                url,
                data=self.form_data(json_payload),
                timeout=self._timeout
            )
        except requests.RequestException as e:
            logger.error(f"Request to {url} failed: {e}", exc_info=True)
            raise TransportError(f"request to {url} failed: {e}") from e

        logger.debug(f"POST {url} -> {response.status_code}")
        return response

    def _json(self, response):
        if response.status_code != 200:
            logger.error(f"Unexpected status {response.status_code}: {response.text}")
            raise ProviderError(response.status_code, response.text)
        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON in response: {response.text!r}")
            raise MalformedResponseError(f"invalid JSON in response: {e}") from e
        if not isinstance(data, dict):
            raise MalformedResponseError(f"expected a JSON object, got: {response.text!r}")
        return data

    def request_stats_key(self, date_from, date_to, request_id):
        """
        Ask the provider to prepare a statistics export

        Args:
            date_from (datetime|int): Period start
            date_to (datetime|int): Period end
            request_id (str): Caller correlation id, passed through as is

        Returns:
            str: Export key for fetch_stats

        Raises:
            TransportError: On network failure
            ProviderError: On a non-200 status
            MalformedResponseError: If the response carries no key
        """
        payload = {
            "date_from": to_unix_time(date_from),
            "date_to": to_unix_time(date_to),
            "fields": stats_fields_param(),
            "request_id": request_id,
        }
        logger.info(
            f"Requesting stats key for {payload['date_from']}..{payload['date_to']} "
            f"(request_id={request_id})"
        )
        data = self._json(self._post(STATS_REQUEST_PATH, payload))

        key = data.get("key")
        if not key or not isinstance(key, str):
            logger.error(f"No stats key in response: {data}")
            raise MalformedResponseError(f"no stats key in response: {data}")

        logger.info(f"Got stats key {key} (request_id={request_id})")
        return key

    def fetch_stats(self, key, request_id=None, lenient_numbers=False):
        """
        Fetch a prepared statistics export

        Does not wait: a 204 from the provider is raised as StatsNotReadyError
        and the caller decides when to ask again.

        Args:
            key (str): Export key from request_stats_key
            request_id (str): Caller correlation id, used for logging
            lenient_numbers (bool): Turn unparsable numbers into 0

        Returns:
            list: CallRecord objects in provider order

        Raises:
            StatsNotReadyError: 204, export still running
            StatsNotFoundError: 404, key invalid or expired
            ProviderError: Any other unexpected status
            MalformedRecordError: If the export cannot be decoded
            TransportError: On network failure
        """
        response = self._post(STATS_RESULT_PATH, {"key": key})
        code = response.status_code

        if code == 200:
            calls = decode_stats(response.content, lenient_numbers=lenient_numbers)
            logger.info(f"Retrieved {len(calls)} call records (request_id={request_id})")
            return calls
        if code == 204:
            logger.debug(f"Stats for key {key} not ready (request_id={request_id})")
            raise StatsNotReadyError(key, STATS_RETRY_AFTER)
        if code == 404:
            logger.error(f"Stats key {key} not found (request_id={request_id})")
            raise StatsNotFoundError(key)

        logger.error(f"Unknown error fetching stats, code: {code}, body: {response.text}")
        raise ProviderError(code, response.text)

    def get_user(self, extension):
        """
        Get a user by extension

        Args:
            extension (str): Internal extension number

        Returns:
            User: First matching user

        Raises:
            UserNotFoundError: If no user has this extension
            ProviderError: On a non-200 status
            MalformedResponseError: If the body is not valid JSON or has the wrong shape
            TransportError: On network failure
        """
        logger.debug(f"Looking up user with extension {extension}")
        data = self._json(self._post(USERS_PATH, {"extension": extension}))

        users = data.get("users") or []
        if not isinstance(users, list):
            logger.error(f"Unexpected users value in response: {users!r}")
            raise MalformedResponseError(f"expected a list of users, got: {users!r}")
        if not users:
            logger.warning(f"User {extension} not found")
            raise UserNotFoundError(extension)

        try:
            user = User.from_dict(users[0])
        except (AttributeError, TypeError, ValueError) as e:
            logger.error(f"Invalid user object in response: {users[0]!r}")
            raise MalformedResponseError(f"invalid user object: {e}") from e

        logger.info(f"Found user {user.name} for extension {extension}")
        return user
