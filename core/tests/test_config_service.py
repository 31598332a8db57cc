"""
core/tests/test_config_service.py

Layer precedence and typing of the ConfigService.
Uses unittest to avoid external test dependencies.
"""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from core.config.config_service import ConfigService


class TestConfigService(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        # keep a real user config.ini out of the picture
        self._env = mock.patch.dict(os.environ, {"XDG_CONFIG_HOME": str(self.tmp / "xdg")})
        self._env.start()

    def tearDown(self) -> None:
        self._env.stop()
        self._tmp.cleanup()

    def test_embedded_defaults(self) -> None:
        cfg = ConfigService(environ={})
        self.assertEqual(cfg.interaction.min_width_px, 50.0)
        self.assertEqual(cfg.interaction.min_height_px, 25.0)
        self.assertEqual(cfg.placement.default_x_percent, 20.0)
        self.assertEqual(cfg.placement.default_y_percent, 15.0)
        self.assertEqual(cfg.preview.render_scale, 1.5)
        self.assertEqual(cfg.files.max_upload_mb, 50)
        self.assertEqual(cfg.files.output_prefix, "completed-")
        self.assertEqual(cfg.meta_source("Files", "max_upload_mb")["layer"], "code")

    def test_environment_layer(self) -> None:
        cfg = ConfigService(environ={
            "SIGNPLACE_INTERACTION__MIN_WIDTH_PX": "80",
            "SIGNPLACE_BROKEN": "ignored",
            "OTHER_INTERACTION__MIN_WIDTH_PX": "1",
        })
        self.assertEqual(cfg.interaction.min_width_px, 80.0)
        self.assertIsInstance(cfg.interaction.min_width_px, float)
        self.assertEqual(cfg.meta_source("Interaction", "min_width_px")["layer"], "env")

    def test_explicit_file_wins_over_environment(self) -> None:
        ini = self.tmp / "override.ini"
        ini.write_text("[Interaction]\nmin_width_px = 120\n\n[Preview]\nrender_scale = 2\n", encoding="utf-8")
        cfg = ConfigService(ini, environ={"SIGNPLACE_INTERACTION__MIN_WIDTH_PX": "80"})
        self.assertEqual(cfg.interaction.min_width_px, 120.0)
        self.assertEqual(cfg.preview.render_scale, 2.0)
        self.assertEqual(cfg.meta_source("Interaction", "min_width_px")["source"], str(ini))

    def test_user_file_layer(self) -> None:
        user_ini = self.tmp / "xdg" / "signplace" / "config.ini"
        user_ini.parent.mkdir(parents=True)
        user_ini.write_text("[Files]\noutput_prefix = signed-\n", encoding="utf-8")
        cfg = ConfigService(environ={})
        self.assertEqual(cfg.files.output_prefix, "signed-")

    def test_get_with_cast(self) -> None:
        cfg = ConfigService(environ={})
        self.assertEqual(cfg.get("Preview", "canvas_width", cast=int), 800)
        self.assertEqual(cfg.get("Logging", "level"), "INFO")
        self.assertIsNone(cfg.get("Nope", "missing"))

    def test_reload_picks_up_changes(self) -> None:
        ini = self.tmp / "override.ini"
        cfg = ConfigService(ini, environ={})
        self.assertEqual(cfg.placement.default_width_percent, 10.0)
        ini.write_text("[Placement]\ndefault_width_percent = 25\n", encoding="utf-8")
        cfg.reload()
        self.assertEqual(cfg.placement.default_width_percent, 25.0)


if __name__ == "__main__":
    unittest.main()
