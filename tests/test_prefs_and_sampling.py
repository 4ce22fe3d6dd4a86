import pathlib
import sys
import tempfile
import unittest
import unittest.mock

# Ensure src/ is on path for direct test execution
ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from linaccel.config.prefs import SensorPrefs, load_prefs, save_prefs  # noqa: E402
from linaccel.config.runtime import LinAccelConfig, config_from_mapping, load_config  # noqa: E402
from linaccel.config.sampling import DEFAULT_TIER, FrequencyTier  # noqa: E402


class FrequencyTierTest(unittest.TestCase):
    def test_stored_values_round_trip(self):
        for tier in FrequencyTier:
            self.assertIs(FrequencyTier.from_value(tier.value), tier)

    def test_parsing_is_forgiving(self):
        self.assertIs(FrequencyTier.from_value("Slow"), FrequencyTier.SLOW)
        self.assertIs(FrequencyTier.from_value(" MEDIUM "), FrequencyTier.MEDIUM)
        self.assertIs(FrequencyTier.from_value("game"), FrequencyTier.MEDIUM)
        self.assertIs(FrequencyTier.from_value("SENSOR_DELAY_FASTEST"), FrequencyTier.FAST)
        self.assertIs(FrequencyTier.from_value(0), FrequencyTier.SLOW)
        self.assertIs(FrequencyTier.from_value(2), FrequencyTier.FAST)

    def test_unknown_values_fall_back_to_default(self):
        with self.assertLogs("linaccel.config.sampling", level="WARNING"):
            self.assertIs(FrequencyTier.from_value("ludicrous"), DEFAULT_TIER)
        self.assertIs(FrequencyTier.from_value(None), DEFAULT_TIER)
        self.assertIs(FrequencyTier.from_value(7, default=FrequencyTier.SLOW), FrequencyTier.SLOW)

    def test_delivery_hints(self):
        self.assertEqual(FrequencyTier.SLOW.hint.platform_name, "SENSOR_DELAY_NORMAL")
        self.assertEqual(FrequencyTier.MEDIUM.hint.delay_us, 20_000)
        self.assertEqual(FrequencyTier.FAST.hint.delay_us, 0)
        self.assertLess(FrequencyTier.SLOW.nominal_hz, FrequencyTier.MEDIUM.nominal_hz)
        self.assertLess(FrequencyTier.MEDIUM.nominal_hz, FrequencyTier.FAST.nominal_hz)


class SensorPrefsTest(unittest.TestCase):
    def test_defaults(self):
        prefs = SensorPrefs()
        self.assertIs(prefs.frequency, FrequencyTier.FAST)
        self.assertFalse(prefs.invert_axes)

    def test_missing_file_gives_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = pathlib.Path(tmpdir) / "nope.yaml"
            self.assertEqual(load_prefs(path), SensorPrefs())

    def test_save_then_load(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = pathlib.Path(tmpdir) / "nested" / "sensor_prefs.yaml"
            prefs = SensorPrefs(frequency=FrequencyTier.SLOW, invert_axes=True)
            save_prefs(prefs, path)
            self.assertIn("sensor_frequency: slow", path.read_text(encoding="utf-8"))
            self.assertEqual(load_prefs(path), prefs)

    def test_non_mapping_file_is_rejected(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = pathlib.Path(tmpdir) / "bad.yaml"
            path.write_text("- slow\n- fast\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_prefs(path)

    def test_from_mapping_coerces_values(self):
        prefs = SensorPrefs.from_mapping({"sensor_frequency": "Medium", "invert_axes": "yes", "extra": 1})
        self.assertEqual(prefs, SensorPrefs(FrequencyTier.MEDIUM, True))
        self.assertEqual(prefs.to_mapping(), {"sensor_frequency": "medium", "invert_axes": True})

    def test_default_location_honours_env(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with unittest.mock.patch.dict("os.environ", {"LINACCEL_CONFIG_DIR": tmpdir}):
                path = save_prefs(SensorPrefs(frequency=FrequencyTier.MEDIUM))
                self.assertEqual(path, pathlib.Path(tmpdir) / "sensor_prefs.yaml")
                self.assertIs(load_prefs().frequency, FrequencyTier.MEDIUM)


class RuntimeConfigTest(unittest.TestCase):
    def test_nested_gauge_block_is_flattened_and_sanitized(self):
        cfg = config_from_mapping({"gauge": {"rate_refresh_ms": 5, "synthetic_jitter": 3.0}, "unknown": 1})
        self.assertEqual(cfg.rate_refresh_ms, 10)
        self.assertEqual(cfg.synthetic_jitter, 0.9)

    def test_empty_mapping_gives_defaults(self):
        self.assertEqual(config_from_mapping(None), LinAccelConfig())

    def test_load_config_from_yaml(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = pathlib.Path(tmpdir) / "linaccel.yaml"
            path.write_text("full_scale: 19.6\nplot_window_seconds: 4\n", encoding="utf-8")
            cfg = load_config(path)
            self.assertAlmostEqual(cfg.full_scale, 19.6)
            self.assertEqual(cfg.plot_window_seconds, 4.0)
            self.assertEqual(load_config(pathlib.Path(tmpdir) / "missing.yaml"), LinAccelConfig())


if __name__ == "__main__":
    unittest.main()
