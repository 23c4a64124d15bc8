from .device import DeviceLocation, StaticLocationSource, IPLocationSource, LocationUnavailable

__all__ = ["DeviceLocation", "StaticLocationSource", "IPLocationSource", "LocationUnavailable"]
