import datetime as dt
import unittest

from fastapi.testclient import TestClient

from weather_guide import tip_manager
from weather_guide.data_sources import WeatherProviderError
from weather_guide.domain import SnapshotSource, WeatherSnapshot
from weather_guide.main import app as fastapi_app
from weather_guide.weather_service import WeatherLookup

# 06:00 UTC is 11:30 in India
FIXED_NOW = dt.datetime(2025, 1, 1, 6, 0, tzinfo=dt.timezone.utc).timestamp()


def _snapshot_payload(**overrides):
    base = {
        "location": "Pune, IN",
        "temperature_c": 22,
        "feels_like_c": 22,
        "condition": "sunny",
        "humidity_pct": 50,
        "rain_probability_pct": 15,
        "wind_speed_kmh": 10,
        "description": "clear sky",
        "timezone_offset_seconds": 19800,
    }
    base.update(overrides)
    return base


def _lookup(source=SnapshotSource.LIVE, error=None, **overrides):
    return WeatherLookup(snapshot=WeatherSnapshot(**_snapshot_payload(**overrides)), source=source, error=error)


class TestApi(unittest.TestCase):
    def setUp(self):
        import weather_guide.api as api_mod
        from weather_guide.config import settings

        self.api_mod = api_mod
        self._orig_get_weather = api_mod.get_weather
        self._orig_now = api_mod._now_epoch
        self._orig_api_key = settings.api_key
        api_mod._now_epoch = lambda: FIXED_NOW
        tip_manager.use_in_memory_store_for_tests()
        self.client = TestClient(fastapi_app)

    def tearDown(self):
        from weather_guide.config import settings

        self.api_mod.get_weather = self._orig_get_weather
        self.api_mod._now_epoch = self._orig_now
        settings.api_key = self._orig_api_key

    def test_cities(self):
        resp = self.client.get("/v1/cities")
        self.assertEqual(resp.status_code, 200)
        cities = resp.json()["cities"]
        self.assertEqual(len(cities), 15)
        self.assertIn("Pune, India", cities)

    def test_weather_by_city(self):
        seen = {}

        def fake_get_weather(**kwargs):
            seen.update(kwargs)
            return _lookup()

        self.api_mod.get_weather = fake_get_weather
        resp = self.client.get("/v1/weather", params={"city": "Pune"})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(seen["city"], "Pune")
        self.assertIsNone(seen["latitude"])
        self.assertEqual(data["snapshot"]["location"], "Pune, IN")
        self.assertEqual(data["source"], "live")
        self.assertEqual(data["theme"], {"background": "weather-bg-sunny", "is_day": True})

    def test_weather_sample_fallback_is_reported(self):
        self.api_mod.get_weather = lambda **kwargs: _lookup(source=SnapshotSource.SAMPLE, error="city not found")
        data = self.client.get("/v1/weather", params={"city": "Atlantis"}).json()
        self.assertEqual(data["source"], "sample")
        self.assertEqual(data["error"], "city not found")

    def test_weather_requires_both_coordinates(self):
        self.api_mod.get_weather = lambda **kwargs: _lookup()
        resp = self.client.get("/v1/weather", params={"lat": 18.5})
        self.assertEqual(resp.status_code, 400)

    def test_weather_rejects_out_of_range_latitude(self):
        resp = self.client.get("/v1/weather", params={"lat": 95, "lon": 10})
        self.assertEqual(resp.status_code, 422)

    def test_provider_error_maps_to_502(self):
        def boom(**kwargs):
            raise WeatherProviderError("Invalid API key")

        self.api_mod.get_weather = boom
        resp = self.client.get("/v1/weather", params={"city": "Pune"})
        self.assertEqual(resp.status_code, 502)
        self.assertIn("Invalid API key", resp.json()["detail"])

    def test_get_advice_with_explicit_hour(self):
        self.api_mod.get_weather = lambda **kwargs: _lookup()
        resp = self.client.get("/v1/advice", params={"city": "Pune", "mode": "activity", "hour": 18})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["mode"], "activity")
        self.assertEqual(data["hour"], 18)
        ids = [m["id"] for m in data["messages"]]
        self.assertEqual(ids, ["greeting", "outdoor-advice", "market-advice", "travel-advice", "sports-advice"])
        self.assertTrue(data["messages"][0]["content"].startswith("Good evening!"))

    def test_get_advice_defaults_to_local_hour(self):
        self.api_mod.get_weather = lambda **kwargs: _lookup()
        data = self.client.get("/v1/advice", params={"city": "Pune"}).json()
        self.assertEqual(data["hour"], 11)
        self.assertEqual(data["mode"], "general")
        self.assertTrue(data["messages"][0]["content"].startswith("Good morning!"))

    def test_get_advice_rejects_unknown_mode(self):
        self.api_mod.get_weather = lambda **kwargs: _lookup()
        resp = self.client.get("/v1/advice", params={"city": "Pune", "mode": "tourist"})
        self.assertEqual(resp.status_code, 422)

    def test_post_advice_for_held_snapshot(self):
        body = {"snapshot": _snapshot_payload(temperature_c=42, rain_probability_pct=10, wind_speed_kmh=15,
                                              humidity_pct=30),
                "mode": "farmer", "hour": 9}
        resp = self.client.post("/v1/advice", json=body)
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertIsNone(data["source"])
        self.assertEqual([m["id"] for m in data["messages"]], ["greeting", "rain-advice", "heat-warning"])

    def test_post_advice_validation(self):
        bad_hour = {"snapshot": _snapshot_payload(), "hour": 24}
        self.assertEqual(self.client.post("/v1/advice", json=bad_hour).status_code, 422)

        extra = {"snapshot": _snapshot_payload(pressure=1000)}
        self.assertEqual(self.client.post("/v1/advice", json=extra).status_code, 422)

        humid = {"snapshot": _snapshot_payload(humidity_pct=120)}
        self.assertEqual(self.client.post("/v1/advice", json=humid).status_code, 422)

    def test_travel_advisory_get_and_post(self):
        self.api_mod.get_weather = lambda **kwargs: _lookup(condition="rainy", rain_probability_pct=80)
        resp = self.client.get("/v1/travel-advisory", params={"city": "Pune"})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertIn("Welcome to Pune, IN!", data["welcome"])
        self.assertTrue(data["community_prompt"])
        self.assertTrue(data["advisory"]["travel"])
        self.assertTrue(data["advisory"]["safety"])
        self.assertIn("raining", data["advisory"]["weather"][0])

        posted = self.client.post("/v1/travel-advisory", json=_snapshot_payload(condition="volcanic ash"))
        self.assertEqual(posted.status_code, 200)
        self.assertEqual(posted.json()["advisory"]["weather"][0], "Current temperature is 22°C.")

    def test_tip_board_flow(self):
        created = self.client.post("/v1/tips", json={
            "location": "Pune, India", "author": "meera", "content": "Sinhagad at sunrise.", "category": "travel",
        })
        self.assertEqual(created.status_code, 201)
        tip = created.json()
        self.assertEqual(tip["likes"], 0)

        listed = self.client.get("/v1/tips", params={"location": "pune, india"}).json()
        self.assertEqual([t["id"] for t in listed["tips"]], [tip["id"]])

        liked = self.client.post(f"/v1/tips/{tip['id']}/like")
        self.assertEqual(liked.status_code, 200)
        self.assertEqual(liked.json()["likes"], 1)

        self.assertEqual(self.client.delete(f"/v1/tips/{tip['id']}").status_code, 204)
        self.assertEqual(self.client.delete(f"/v1/tips/{tip['id']}").status_code, 404)
        self.assertEqual(self.client.post(f"/v1/tips/{tip['id']}/like").status_code, 404)

    def test_blank_tip_rejected(self):
        resp = self.client.post("/v1/tips", json={"location": "Pune", "author": "x", "content": "   "})
        self.assertEqual(resp.status_code, 400)

    def test_requires_api_key_when_set(self):
        from weather_guide.config import settings

        settings.api_key = "sekret"
        missing = self.client.get("/v1/cities")
        self.assertEqual(missing.status_code, 401)

        wrong = self.client.get("/v1/cities", headers={"X-API-Key": "nope"})
        self.assertEqual(wrong.status_code, 401)

        ok = self.client.get("/v1/cities", headers={"X-API-Key": "sekret"})
        self.assertEqual(ok.status_code, 200)


if __name__ == "__main__":
    unittest.main()
