import os
import unittest

from weather_guide.config import Settings


class TestConfig(unittest.TestCase):
    def _with_env(self, name, value):
        previous = os.environ.get(name)
        os.environ[name] = value
        self.addCleanup(self._restore, name, previous)

    @staticmethod
    def _restore(name, previous):
        if previous is None:
            os.environ.pop(name, None)
        else:
            os.environ[name] = previous

    def test_settings_defaults(self):
        previous = os.environ.pop("GUIDE_WEATHER_SOURCE", None)
        try:
            s = Settings()
            self.assertEqual(s.weather_source, "openweathermap")
            self.assertEqual(s.default_location, "Mumbai, India")
            self.assertEqual(s.max_tip_chars, 500)
            self.assertTrue(s.fallback_to_sample)
        finally:
            if previous is not None:
                os.environ["GUIDE_WEATHER_SOURCE"] = previous

    def test_settings_env_override(self):
        self._with_env("GUIDE_WEATHER_SOURCE", "mock")
        self._with_env("GUIDE_FALLBACK_TO_SAMPLE", "false")
        self._with_env("GUIDE_MAX_TIP_CHARS", "120")
        s = Settings()
        self.assertEqual(s.weather_source, "mock")
        self.assertFalse(s.fallback_to_sample)
        self.assertEqual(s.max_tip_chars, 120)

    def test_base_url_trailing_slash_is_stripped(self):
        self._with_env("GUIDE_OPENWEATHERMAP_BASE_URL", "https://owm.example/data/2.5/")
        s = Settings()
        self.assertEqual(s.openweathermap_base_url, "https://owm.example/data/2.5")


if __name__ == "__main__":
    unittest.main()
