"""Consent cookies for Google Flights requests."""

from __future__ import annotations

import base64
import datetime
import logging
import time
from collections.abc import Mapping

from sky_flights.config import DEFAULT_COOKIES

from .proto.flights import SOCS, Datetime, Information

logger = logging.getLogger(__name__)


class CookieManager:
    """Builds the ``Cookie`` header that gets past the consent wall."""

    @staticmethod
    def header(cookies: Mapping[str, str] | None = None) -> str:
        """Serialise cookies as ``name=value;`` pairs, in insertion order."""
        if cookies is None:
            cookies = DEFAULT_COOKIES
        return "".join(f"{name}={value};" for name, value in cookies.items())

    @staticmethod
    def generate(*, locale: str = "en") -> dict[str, str]:
        """Return a fresh CONSENT + SOCS cookie pair minted via protobuf."""
        info = Information()
        info.gws = f"gws_{datetime.datetime.now().strftime('%Y%m%d')}-0_RC2"
        info.locale = locale

        dt = Datetime()
        dt.timestamp = int(time.time())

        socs = SOCS(info=info, datetime=dt)
        socs_b64 = base64.b64encode(socs.SerializeToString()).decode("utf-8")
        logger.debug("Generated SOCS consent cookie for locale %s", locale)

        return {
            "CONSENT": "PENDING+987",
            "SOCS": socs_b64,
        }
