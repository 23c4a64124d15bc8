import pytest
import requests

from geocoding.nominatim_client import GeocodingError, NominatimClient, Place
from routing.osrm_client import OSRMClient, OSRMError, RoutingTransportError


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=None):
        self.payload = payload
        self.status_code = status_code
        self.text = text if text is not None else ""

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self.payload is None:
            raise ValueError("No JSON object could be decoded")
        return self.payload


class FakeSession:
    """Returns queued responses and records each GET."""
    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.requests.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


# ---------------- OSRM ----------------

def test_osrm_compute_route_requests_minimal_response():
    session = FakeSession(FakeResponse({
        "code": "Ok",
        "routes": [{"distance": 1234.5, "duration": 300.2}, {"distance": 1.0, "duration": 1.0}],
    }))
    osrm = OSRMClient(base_url="http://osrm.test/", session=session, timeout=3)

    route = osrm.compute_route([(52.517037, 13.388860), (52.529407, 13.397634)])

    assert route == {"distance": 1234.5, "duration": 300.2}
    request = session.requests[0]
    assert request["url"] == "http://osrm.test/route/v1/driving/13.38886,52.517037;13.397634,52.529407"
    assert request["params"] == {
        "overview": "false",
        "alternatives": "false",
        "steps": "false",
        "annotations": "false",
    }
    assert request["timeout"] == 3
    assert "User-Agent" in request["headers"]


def test_osrm_no_route_carries_provider_message():
    session = FakeSession(FakeResponse({"code": "NoRoute", "message": "Impossible route between points"}, status_code=400))
    osrm = OSRMClient(base_url="http://osrm.test", session=session)

    with pytest.raises(OSRMError) as excinfo:
        osrm.compute_route([(0.0, 0.0), (1.0, 1.0)])

    assert excinfo.value.code == "NoRoute"
    assert excinfo.value.message == "Impossible route between points"


def test_osrm_ok_without_routes_is_no_route():
    session = FakeSession(FakeResponse({"code": "Ok", "routes": []}))

    with pytest.raises(OSRMError) as excinfo:
        OSRMClient(base_url="http://osrm.test", session=session).compute_route([(0.0, 0.0), (1.0, 1.0)])

    assert excinfo.value.message is None


@pytest.mark.parametrize("response", [
    requests.ConnectionError("refused"),
    requests.Timeout("slow"),
    FakeResponse(None, status_code=502, text="<html>Bad Gateway</html>"),
])
def test_osrm_transport_failures(response):
    osrm = OSRMClient(base_url="http://osrm.test", session=FakeSession(response))

    with pytest.raises(RoutingTransportError):
        osrm.compute_route([(0.0, 0.0), (1.0, 1.0)])


def test_osrm_needs_two_coordinates():
    with pytest.raises(ValueError):
        OSRMClient(base_url="http://osrm.test", session=FakeSession()).compute_route([(0.0, 0.0)])


# ---------------- Nominatim ----------------

def test_nominatim_search_parses_places_and_sends_user_agent():
    session = FakeSession(FakeResponse([
        {"lat": "48.8584", "lon": "2.2945", "display_name": "Tour Eiffel, Paris"},
        {"lat": "bad", "lon": "2.0", "display_name": "Broken"},
    ]))
    client = NominatimClient(base_url="https://nominatim.test", user_agent="HegGeoTest/1.0", session=session)

    places = client.search("Eiffel Tower")

    assert places == [Place(48.8584, 2.2945, "Tour Eiffel, Paris")]
    request = session.requests[0]
    assert request["url"] == "https://nominatim.test/search"
    assert request["params"]["q"] == "Eiffel Tower"
    assert request["params"]["limit"] == 1
    assert request["headers"] == {"User-Agent": "HegGeoTest/1.0"}


def test_nominatim_search_empty_result():
    client = NominatimClient(base_url="https://nominatim.test", session=FakeSession(FakeResponse([])))
    assert client.search("Atlantis") == []


def test_nominatim_reverse():
    session = FakeSession(FakeResponse({"display_name": "Paris, France"}), FakeResponse({"error": "Unable to geocode"}))
    client = NominatimClient(base_url="https://nominatim.test", session=session)

    assert client.reverse(48.8566, 2.3522) == "Paris, France"
    assert session.requests[0]["params"]["lat"] == 48.8566
    assert client.reverse(0.0, -160.0) is None


def test_nominatim_reverse_rejects_invalid_coordinates():
    session = FakeSession()
    client = NominatimClient(base_url="https://nominatim.test", session=session)

    with pytest.raises(ValueError):
        client.reverse(91.0, 0.0)
    assert session.requests == []


@pytest.mark.parametrize("response", [
    requests.ConnectionError("refused"),
    FakeResponse([], status_code=429, text="Too Many Requests"),
    FakeResponse(None, status_code=200, text="not json"),
])
def test_nominatim_transport_failures(response):
    client = NominatimClient(base_url="https://nominatim.test", session=FakeSession(response))

    with pytest.raises(GeocodingError):
        client.search("Paris")


@pytest.mark.parametrize("routes", [
    [{"distance": 1.0}],
    [{"duration": 60.0}],
    [{"distance": None, "duration": 60.0}],
    [{"distance": "far", "duration": 60.0}],
    [{"distance": 1.0, "duration": float("inf")}],
    ["not-a-route"],
])
def test_osrm_malformed_route_is_transport_error(routes):
    session = FakeSession(FakeResponse({"code": "Ok", "routes": routes}))

    with pytest.raises(RoutingTransportError) as excinfo:
        OSRMClient(base_url="http://osrm.test", session=session).compute_route([(0.0, 0.0), (1.0, 1.0)])

    assert "malformed route" in str(excinfo.value)


def test_osrm_http_failure_message_carries_status():
    session = FakeSession(FakeResponse(None, status_code=502, text="<html>Bad Gateway</html>"))

    with pytest.raises(RoutingTransportError) as excinfo:
        OSRMClient(base_url="http://osrm.test", session=session).compute_route([(0.0, 0.0), (1.0, 1.0)])

    assert "HTTP 502" in str(excinfo.value)
