import httpx

from wanderwise.services.weather_service import WeatherService, city_from_destination

API_URL = "https://weather.test/forecast"

FORECAST = {
    "list": [
        {
            "dt": 1806969600,  # 2027-04-06 00:00 UTC, a Tuesday
            "main": {"temp": 18.6, "temp_min": 12.4},
            "weather": [{"main": "Clouds", "icon": "04d"}],
        },
        {
            "dt": 1807056000,
            "main": {"temp": 21.2, "temp_min": 14.5},
            "weather": [{"main": "Clear", "icon": "01d"}],
        },
    ]
}


def make_service(handler, api_key="key"):
    return WeatherService(api_key=api_key, api_url=API_URL, count=2, client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_city_from_destination():
    assert city_from_destination("Kyoto, Japan") == "Kyoto"
    assert city_from_destination("  Lisbon ") == "Lisbon"
    assert city_from_destination("") == ""


def test_get_forecast():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=FORECAST)

    forecast = make_service(handler).get_forecast("Kyoto, Japan")

    assert seen["params"] == {"q": "Kyoto", "appid": "key", "units": "metric", "cnt": "2"}
    assert [f.day for f in forecast] == ["Tue", "Wed"]
    assert forecast[0].temp == 19
    assert forecast[0].min_temp == 12
    assert forecast[1].weather == "Clear"
    assert forecast[1].icon == "01d"


def test_missing_api_key_skips_the_call():
    def handler(request):
        raise AssertionError("no request expected")

    assert make_service(handler, api_key=None).get_forecast("Kyoto, Japan") == []


def test_upstream_error_gives_empty_forecast():
    assert make_service(lambda request: httpx.Response(401, json={"message": "Invalid API key"})).get_forecast("Kyoto") == []


def test_unexpected_payload_gives_empty_forecast():
    broken = {"list": [{"dt": 1806969600, "main": {}}]}
    assert make_service(lambda request: httpx.Response(200, json=broken)).get_forecast("Kyoto") == []
