"""
Purpose: Saved SOS configurations and the emergency message built from them.
What it does:
- Keeps a list of SOSConfig in the key-value store with exactly one default
  whenever the list is non-empty
- Builds the SOS text for the default config and the wa.me link that sends it

Rule: One model only, a list with a single default. There is no separate
single-config mode.
"""

from __future__ import annotations

import json
import logging
import re
import uuid
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional

from geocoding.coordinates import describe_location
from markers.lifecycle import NoLocationException
from markers.store import KeyValueStore
from .messages import APP_LINK, HASHTAG, google_maps_link, whatsapp_url

logger = logging.getLogger(__name__)

SOS_CONFIG_STORAGE_KEY = "heggeo_sos_configurations_array"

_PHONE_PATTERN = re.compile(r"^\+\d+$")


class SOSConfigError(Exception):
    """SOS settings are missing, invalid or unreadable."""
    pass


@dataclass(frozen=True)
class SOSConfig:
    id: str
    name: str
    target_phone_number: str # international format, e.g. +447700900123
    contact_display_name: str
    user_name: str
    default_situation: str
    is_default: bool = False

    def validate(self) -> None:
        required = [self.name, self.target_phone_number, self.contact_display_name,
                    self.user_name, self.default_situation]
        if not all(value and value.strip() for value in required):
            raise SOSConfigError("Please fill in all SOS fields.")
        if not _PHONE_PATTERN.match(self.target_phone_number):
            raise SOSConfigError("Phone number must start with + followed by digits only, e.g. +447700900123.")

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "targetPhoneNumber": self.target_phone_number,
            "contactDisplayName": self.contact_display_name,
            "userName": self.user_name,
            "defaultSituation": self.default_situation,
            "isDefault": self.is_default,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> SOSConfig:
        return cls(
            id=str(record["id"]),
            name=record["name"],
            target_phone_number=record["targetPhoneNumber"],
            contact_display_name=record["contactDisplayName"],
            user_name=record["userName"],
            default_situation=record["defaultSituation"],
            is_default=bool(record.get("isDefault", False)),
        )

    @staticmethod
    def new(name: str, target_phone_number: str, contact_display_name: str,
            user_name: str, default_situation: str, is_default: bool = False) -> SOSConfig:
        return SOSConfig(
            id=str(uuid.uuid4()),
            name=name,
            target_phone_number=target_phone_number,
            contact_display_name=contact_display_name,
            user_name=user_name,
            default_situation=default_situation,
            is_default=is_default,
        )


def _normalize_defaults(configs: List[SOSConfig]) -> List[SOSConfig]:
    """
    Keep exactly one default: the first flagged one, else the first config.
    """
    if not configs:
        return configs
    default_index = next((i for i, c in enumerate(configs) if c.is_default), 0)
    return [replace(c, is_default=(i == default_index)) for i, c in enumerate(configs)]


class SOSConfigRegistry:
    def __init__(self, store: KeyValueStore, storage_key: str = SOS_CONFIG_STORAGE_KEY):
        self.store = store
        self.storage_key = storage_key

    def all(self) -> List[SOSConfig]:
        raw = self.store.get(self.storage_key)
        if raw is None:
            return []
        try:
            records = json.loads(raw)
            if not isinstance(records, list):
                raise TypeError("SOS configurations must be a list")
            return [SOSConfig.from_record(r) for r in records]
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Error parsing SOS configurations: %s", e)
            raise SOSConfigError("Could not load SOS settings. Please re-configure.") from e

    def _save(self, configs: List[SOSConfig]) -> None:
        self.store.set(self.storage_key, json.dumps([c.to_record() for c in configs]))

    def get(self, config_id: str) -> Optional[SOSConfig]:
        return next((c for c in self.all() if c.id == config_id), None)

    def default(self) -> Optional[SOSConfig]:
        return next((c for c in self.all() if c.is_default), None)

    def add(self, config: SOSConfig) -> SOSConfig:
        """
        The first config, or one flagged is_default, becomes the default.
        """
        config.validate()
        configs = self.all()
        if any(c.id == config.id for c in configs):
            raise SOSConfigError(f"SOS configuration {config.id} already exists.")

        if not any(c.is_default for c in configs):
            config = replace(config, is_default=True)
        if config.is_default:
            configs = [replace(c, is_default=False) for c in configs]

        configs.append(config)
        self._save(configs)
        return config

    def update(self, config: SOSConfig) -> SOSConfig:
        config.validate()
        configs = self.all()
        if not any(c.id == config.id for c in configs):
            raise SOSConfigError(f"No SOS configuration with id {config.id}.")

        updated = []
        for c in configs:
            if c.id == config.id:
                updated.append(config)
            elif config.is_default:
                updated.append(replace(c, is_default=False))
            else:
                updated.append(c)

        updated = _normalize_defaults(updated)
        self._save(updated)
        return next(c for c in updated if c.id == config.id)

    def delete(self, config_id: str) -> None:
        remaining = [c for c in self.all() if c.id != config_id]
        self._save(_normalize_defaults(remaining))

    def set_default(self, config_id: str) -> SOSConfig:
        configs = self.all()
        if not any(c.id == config_id for c in configs):
            raise SOSConfigError(f"No SOS configuration with id {config_id}.")
        configs = [replace(c, is_default=(c.id == config_id)) for c in configs]
        self._save(configs)
        return next(c for c in configs if c.is_default)


def build_sos_message(config: SOSConfig, location_text: str, latitude: float, longitude: float) -> str:
    parts = [
        f"{config.contact_display_name},",
        f"It Is {config.user_name},",
        f"I am in {config.default_situation}",
        f"Find me here: {location_text} ({google_maps_link(latitude, longitude)})",
        f"{HASHTAG} Link: {APP_LINK}",
    ]
    return "\n".join(parts)


def prepare_sos(registry: SOSConfigRegistry, device, geocoder) -> str:
    """
    wa.me link carrying the SOS message for the default config.

    Raises SOSConfigError when nothing is configured and NoLocationException
    when the device position cannot be determined.
    """
    config = registry.default()
    if config is None:
        if registry.all():
            raise SOSConfigError("Please set a default SOS configuration.")
        raise SOSConfigError("Please set up your SOS contact and message first.")

    location = device.location or device.refresh()
    if location is None:
        raise NoLocationException(
            device.error or "Could not get your current location for SOS. Please enable location services."
        )

    latitude, longitude = location
    location_text = describe_location(geocoder, latitude, longitude, precision=5)
    message = build_sos_message(config, location_text, latitude, longitude)
    logger.info("Prepared SOS message using %r", config.name)
    return whatsapp_url(message, config.target_phone_number)
