import contextlib
import io
import json
import random
import tempfile
import unittest
from pathlib import Path

import main
from connex.core.models import Anchor, Cell, Layout
from connex.engine.session import evaluate_trail
from connex.engine.templates import serpentine
from connex.engine.walls import build_shortcut_walls


SMALL_ARGS = [
    "--cols", "4",
    "--rows", "4",
    "--anchors", "3",
    "--min-gap", "2",
    "--wall-pct", "0",
    "--seed", "5",
    "--max-attempts", "60",
    "--quick-budget-ms", "1000",
    "--log-level", "ERROR",
]


def run_main(argv) -> dict:
    stream = io.StringIO()
    with contextlib.redirect_stdout(stream):
        main.main(argv)
    return json.loads(stream.getvalue())


class CliTests(unittest.TestCase):
    def test_generate_payload(self) -> None:
        payload = run_main(SMALL_ARGS + ["--solution"])
        self.assertTrue(payload["ok"])
        self.assertEqual(payload["mode"], "standard")
        self.assertEqual(payload["layout"]["cols"], 4)
        self.assertEqual(sorted(a["n"] for a in payload["layout"]["anchors"]), [1, 2, 3])

        layout = Layout.from_jsonable(payload["layout"])
        self.assertEqual(payload["layout"]["start"], [layout.start.x, layout.start.y])
        trail = [Cell(x, y) for x, y in payload["solution"]]
        self.assertTrue(evaluate_trail(layout, trail))

    def test_invalid_config_exits(self) -> None:
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                main.main(["--cols", "2", "--rows", "2", "--anchors", "5", "--log-level", "ERROR"])

    def test_verify_saved_layout(self) -> None:
        path = serpentine(4, 4)
        walls = build_shortcut_walls(path, 4, 4, 1.0, random.Random(0))
        layout = Layout.from_parts(4, 4, [Anchor(1, path[0]), Anchor(2, path[15])], walls)
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "layout.json"
            target.write_text(json.dumps({"layout": layout.to_jsonable()}), encoding="utf-8")
            payload = run_main(["--verify", str(target), "--log-level", "ERROR"])
        self.assertTrue(payload["solvable"])
        self.assertEqual(payload["trail"], [[cell.x, cell.y] for cell in path])

    def test_output_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "out.json"
            main.main(SMALL_ARGS + ["--output", str(target)])
            payload = json.loads(target.read_text(encoding="utf-8"))
        self.assertTrue(payload["ok"])
        self.assertIn("template", payload)


if __name__ == "__main__":
    unittest.main()
