"""
Sharing package: share links for the active Geo and SOS messages.
"""
from .messages import google_maps_link, whatsapp_url, build_share_message, share_marker_url
from .sos import SOSConfig, SOSConfigRegistry, SOSConfigError, build_sos_message, prepare_sos

__all__ = ["google_maps_link",
           "whatsapp_url",
             "build_share_message",
             "share_marker_url",
             "SOSConfig",
             "SOSConfigRegistry",
             "SOSConfigError",
             "build_sos_message",
             "prepare_sos",
             ]
