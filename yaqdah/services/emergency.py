# 위치 정보 포함 긴급 문자 발송

import logging
import requests
from twilio.rest import Client

from yaqdah.utils.helpers import get_timestamp, maps_link

logger = logging.getLogger(__name__)

ALERT_TEMPLATE = (
    "EMERGENCY: the driver appears to be asleep at the wheel ({time}). "
    "Last known location: {location}"
)
MANUAL_ALERT_TEMPLATE = (
    "EMERGENCY: the driver requested help ({time}). "
    "Last known location: {location}"
)


def parse_location(text):
    """'lat,lng' -> (lat, lng); None when the text is not a coordinate pair."""
    if not text:
        return None
    try:
        lat, lng = (float(part) for part in text.split(","))
    except ValueError:
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        return None
    return lat, lng


class LocationProvider:
    """Current coordinates from a fixed setting or an IP geolocation endpoint."""

    def __init__(self, url="https://ipinfo.io/json", fixed=None, timeout=5, session=None):
        self.url = url
        self.fixed = parse_location(fixed) if isinstance(fixed, str) else fixed
        self.timeout = timeout
        self.session = session or requests.Session()

    def current(self):
        if self.fixed:
            return self.fixed
        if not self.url:
            return None
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Location lookup failed: {e}")
            return None

        if "loc" in payload:
            return parse_location(payload["loc"])
        if "latitude" in payload and "longitude" in payload:
            try:
                return float(payload["latitude"]), float(payload["longitude"])
            except (TypeError, ValueError):
                return None
        logger.warning("Location response carried no coordinates")
        return None


class EmergencyNotifier:
    """Sends the emergency SMS to every configured contact."""

    def __init__(self, client, from_number, contacts, location_provider=None):
        self.client = client
        self.from_number = from_number
        self.contacts = list(contacts or [])
        self.location_provider = location_provider or LocationProvider()

    def build_message(self, manual=False):
        location = self.location_provider.current()
        location_text = maps_link(*location) if location else "unavailable"
        template = MANUAL_ALERT_TEMPLATE if manual else ALERT_TEMPLATE
        return template.format(time=get_timestamp(), location=location_text)

    def send_emergency_alert(self, manual=False):
        """
        Send the alert to all contacts.

        Returns:
            int: number of messages accepted by the SMS provider
        """
        if self.client is None or not self.from_number:
            logger.error("SMS credentials are not configured, emergency alert skipped")
            return 0
        if not self.contacts:
            logger.error("No emergency contacts configured, emergency alert skipped")
            return 0

        body = self.build_message(manual=manual)
        sent = 0
        for contact in self.contacts:
            try:
                message = self.client.messages.create(body=body, from_=self.from_number, to=contact)
                logger.info(f"Emergency SMS sent to {contact} ({getattr(message, 'sid', '?')})")
                sent += 1
            except Exception as e:
                logger.error(f"Emergency SMS to {contact} failed: {e}")
        return sent

    @classmethod
    def from_config(cls, config):
        client = None
        if config.get("TWILIO_ACCOUNT_SID") and config.get("TWILIO_AUTH_TOKEN"):
            client = Client(config["TWILIO_ACCOUNT_SID"], config["TWILIO_AUTH_TOKEN"])
        location = LocationProvider(url=config.get("LOCATION_URL"), fixed=config.get("FIXED_LOCATION"))
        return cls(client, config.get("TWILIO_FROM_NUMBER"), config.get("EMERGENCY_CONTACTS"), location)
