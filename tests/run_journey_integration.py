import logging

from geocoding import NominatimClient
from markers import MarkerManager, MemoryStore, default_marker_policy
from routing import JourneyService, OSRMClient, format_distance, format_duration, format_time_remaining
from sharing import share_marker_url


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    service = JourneyService(NominatimClient(timeout=10), OSRMClient(profile="driving", timeout=10))

    for source, destination in [
        ("52.517037,13.388860", "52.529407,13.397634"),  # (lat, lon) pairs, Berlin
        ("Brandenburger Tor, Berlin", "Alexanderplatz, Berlin"),
        ("Atlantis", "Berlin"),
    ]:
        outcome = service.lookup(source, destination)
        if outcome.ok:
            d = outcome.details
            print(
                f"\n{d.source_name}\n -> {d.destination_name}\n"
                f"   {format_distance(d.distance_m)}, {format_duration(d.duration_s)}"
            )
        else:
            print(f"\n{source} -> {destination}: [{outcome.kind}] {outcome.error}")

    manager = MarkerManager(MemoryStore())
    manager.add_expiry_listener(lambda m: print(f"Geo {m.id} expired"))
    marker = manager.create((52.517037, 13.388860), default_marker_policy().default_lifespan())
    print(f"\nDropped Geo {marker.id}, {format_time_remaining(manager.remaining_ms())} left")
    print(share_marker_url(marker, "Brandenburger Tor, Berlin"))
    manager.close()

if __name__ == "__main__":
    main()
