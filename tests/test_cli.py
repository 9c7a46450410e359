import unittest
import uuid
from pathlib import Path
from unittest.mock import patch

import main as cli
from hoopsday.config import Config
from hoopsday.session import TournamentSession
from hoopsday.store import SnapshotStore


class StepCommandTests(unittest.TestCase):
    def setUp(self) -> None:
        self.path = Path(f".test_cli_{uuid.uuid4().hex}.json")
        self.addCleanup(lambda: self.path.unlink(missing_ok=True))
        patcher = patch.object(
            cli,
            "open_session",
            side_effect=lambda config: TournamentSession(
                store=SnapshotStore(self.path), config=Config()
            ),
        )
        patcher.start()
        self.addCleanup(patcher.stop)

    def _run(self, *argv: str) -> tuple[int, str]:
        with cli.console.capture() as capture:
            code = cli.main(["--config", f".missing_{uuid.uuid4().hex}.yaml", *argv])
        return code, capture.get()

    def test_reachable_step_is_only_checked(self) -> None:
        code, out = self._run("step", "walk-in-registration")
        self.assertEqual(code, 0)
        self.assertIn("reachable", out)
        self.assertNotIn("Now at", out)

    def test_unreachable_step_is_refused(self) -> None:
        code, out = self._run("step", "score-tracking")
        self.assertEqual(code, 1)
        self.assertIn("Rejected", out)
