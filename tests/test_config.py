import unittest
import uuid
from pathlib import Path

from hoopsday.config import Config, load_config


class LoadConfigTests(unittest.TestCase):
    def _write(self, text: str) -> Path:
        path = Path(f".test_config_{uuid.uuid4().hex}.yaml")
        self.addCleanup(lambda: path.unlink(missing_ok=True))
        path.write_text(text, encoding="utf-8")
        return path

    def test_missing_file_raises(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_config(f".missing_{uuid.uuid4().hex}.yaml")

    def test_missing_ok_returns_defaults(self) -> None:
        cfg = load_config(f".missing_{uuid.uuid4().hex}.yaml", missing_ok=True)
        self.assertEqual(cfg, Config())
        self.assertEqual(cfg.settings.court_count, 2)
        self.assertEqual(cfg.roster.source, "none")
        self.assertEqual(cfg.storage_path, Path("./basketball-tournament-data.json"))

    def test_empty_file_uses_defaults(self) -> None:
        self.assertEqual(load_config(self._write("")), Config())

    def test_full_config(self) -> None:
        cfg = load_config(self._write(
            "tournament:\n"
            "  name: Fall Classic\n"
            "  date: 2026-10-24\n"
            "settings:\n"
            "  court_count: 3\n"
            "  game_length: 12\n"
            "  allow_walk_ins: false\n"
            "roster:\n"
            "  source: supabase\n"
            "  url: https://demo.supabase.co\n"
            "  api_key: anon\n"
            "  timeout: 5\n"
            "storage:\n"
            "  path: ./data/tournament.json\n"
        ))
        self.assertEqual(cfg.tournament.name, "Fall Classic")
        self.assertEqual(cfg.tournament.date, "2026-10-24")
        self.assertEqual(cfg.settings.court_count, 3)
        self.assertEqual(cfg.settings.game_length, 12)
        self.assertEqual(cfg.settings.max_players_per_team, 4)
        self.assertFalse(cfg.settings.allow_walk_ins)
        self.assertEqual(cfg.roster.source, "supabase")
        self.assertEqual(cfg.roster.timeout, 5)
        self.assertEqual(cfg.storage_path, Path("data/tournament.json"))

    def test_invalid_settings_raise_value_error(self) -> None:
        for text in (
            "settings:\n  court_count: 0\n",
            "settings:\n  min_players_per_team: 5\n  max_players_per_team: 4\n",
            "settings:\n  tournament_style: knockout\n",
        ):
            with self.subTest(text=text), self.assertRaises(ValueError):
                load_config(self._write(text))

    def test_unknown_roster_source(self) -> None:
        with self.assertRaises(ValueError):
            load_config(self._write("roster:\n  source: spreadsheet\n"))

    def test_supabase_requires_credentials(self) -> None:
        with self.assertRaises(ValueError):
            load_config(self._write("roster:\n  source: supabase\n"))

    def test_wrong_structure(self) -> None:
        with self.assertRaises(ValueError):
            load_config(self._write("settings: [1, 2]\n"))
