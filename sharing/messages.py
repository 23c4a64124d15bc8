"""
Purpose: Build the outbound share text and the URLs that hand it to WhatsApp.
This system only constructs these links; opening them is up to the caller.
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import quote

from markers.models import Marker

APP_LINK = "https://heggeo.netlify.app/"
HASHTAG = "#HegGeo"
WHATSAPP_BASE_URL = "https://wa.me/"

# same set of characters JavaScript's encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


def google_maps_link(latitude: float, longitude: float) -> str:
    return f"https://www.google.com/maps?q={latitude},{longitude}"


def whatsapp_url(text: str, phone_number: Optional[str] = None) -> str:
    """
    wa.me link pre-filled with `text`. The phone number is reduced to digits.
    """
    digits = re.sub(r"\D", "", phone_number or "")
    return f"{WHATSAPP_BASE_URL}{digits}?text={quote(text, safe=_URI_COMPONENT_SAFE)}"


def build_share_message(marker: Marker, location_text: Optional[str] = None, custom_message: str = "") -> str:
    if not location_text:
        location_text = f"Lat: {marker.latitude:.4f}, Lon: {marker.longitude:.4f}"

    parts = [
        "Hi, I am sending my current Geo Location to you as this is where I am:",
        location_text,
    ]
    if custom_message and custom_message.strip():
        parts.append(f"\n{custom_message.strip()}")

    parts.append(f"\nHere is a Link to the GeoDrop: {google_maps_link(marker.latitude, marker.longitude)}")
    parts.append(f"\n{HASHTAG}")
    parts.append(f"Check out HegGeo: {APP_LINK}")
    return "\n".join(parts)


def share_marker_url(marker: Marker, location_text: Optional[str] = None, custom_message: str = "") -> str:
    return whatsapp_url(build_share_message(marker, location_text, custom_message))
