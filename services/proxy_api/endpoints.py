"""The proxied endpoints: dog image, current weather, and sample data."""

import logging
from typing import Any, Dict

from shared.config import Settings
from shared.upstream_client import UpstreamReply
from proxy_api.errors import UpstreamLogicalError, UpstreamTransportError
from proxy_api.handler import EndpointConfig, RequiredParam

logger = logging.getLogger(__name__)

WEATHER_FAILURE = "Something went wrong"


def project_dog(data: Dict[str, Any]) -> Dict[str, Any]:
    return {"imageUrl": data["message"]}


def project_weather(data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "city": data["name"],
        "temperature": data["main"]["temp"],
        "description": data["weather"][0]["description"],
    }


def passthrough(data: Any) -> Any:
    return data


def check_weather_reply(reply: UpstreamReply) -> None:
    """Raise when the OpenWeather body reports a non-200 ``cod``.

    OpenWeather sends ``cod`` as an int on success and as a string such as
    ``"404"`` on errors, so it is compared as an int.
    """
    data = reply.data
    if not isinstance(data, dict):
        raise UpstreamTransportError(WEATHER_FAILURE)

    try:
        cod = int(data.get("cod"))
    except (TypeError, ValueError):
        logger.warning("Weather upstream sent unusable cod %r", data.get("cod"))
        raise UpstreamTransportError(WEATHER_FAILURE)

    if cod == 200:
        return
    if not 400 <= cod <= 599:
        logger.warning("Weather upstream sent non-error cod %d", cod)
        raise UpstreamTransportError(WEATHER_FAILURE)

    message = data.get("message")
    if not isinstance(message, str) or not message:
        message = WEATHER_FAILURE
    logger.info("Weather upstream reported %d: %s", cod, message)
    raise UpstreamLogicalError(message, cod)


def build_endpoints(settings: Settings) -> Dict[str, EndpointConfig]:
    """Endpoint configs keyed by name, with URLs and credential from settings."""
    endpoints = [
        EndpointConfig(
            name="dog",
            path="/api/dog",
            url=settings.dog_api_url,
            project=project_dog,
            failure_message="Failed to fetch dog image",
        ),
        EndpointConfig(
            name="weather",
            path="/api/weather",
            url=settings.weather_api_url,
            project=project_weather,
            failure_message=WEATHER_FAILURE,
            required=(RequiredParam("city", "City"),),
            params_template={"q": "{city}", "units": "metric"},
            credential_param="appid",
            credential=settings.openweather_api_key,
            check_reply=check_weather_reply,
        ),
        EndpointConfig(
            name="sample",
            path="/api/sample",
            url=settings.sample_api_url,
            project=passthrough,
            failure_message="Failed to fetch sample data",
        ),
    ]
    return {endpoint.name: endpoint for endpoint in endpoints}
