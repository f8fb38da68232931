import io
import sys
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

import numpy as np
from PIL import Image

import pixelate


def _write_image(path, height=12, width=16):
    img = np.zeros((height, width, 4), dtype=np.uint8)
    img[:, : width // 2] = (200, 30, 30, 255)
    img[:, width // 2 :] = (20, 40, 220, 255)
    Image.fromarray(img).save(path)
    return img


class TestPixelateCli(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def _run(self, argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            status = pixelate.main(argv)
        return status, out.getvalue(), err.getvalue()

    def test_single_file_with_overlay(self):
        src = self.dir / "split.png"
        img = _write_image(src)
        status, out, _err = self._run(
            [str(src), "--step", "4", "--iterations", "3", "--weight", "1",
             "--block-size", "2", "--contours", "--centers"]
        )
        self.assertEqual(status, 0)
        self.assertIn("split_pixel.png", out)
        result = np.array(Image.open(self.dir / "split_pixel.png"))
        self.assertEqual(result.shape, img.shape)
        np.testing.assert_array_equal(result, img)
        self.assertTrue((self.dir / "split_overlay.png").exists())

    def test_folder_mode_skips_outputs(self):
        _write_image(self.dir / "a.png")
        _write_image(self.dir / "b.png", height=9, width=9)
        outdir = self.dir / "out"
        status, out, _err = self._run(
            [str(self.dir), "--outdir", str(outdir), "--step", "3", "--jobs", "2"]
        )
        self.assertEqual(status, 0)
        self.assertTrue((outdir / "a_pixel.png").exists())
        self.assertTrue((outdir / "b_pixel.png").exists())
        self.assertIn("Wrote a_pixel.png", out)
        self.assertIn("Wrote b_pixel.png", out)

        self.assertEqual(pixelate.list_images(outdir), [])

    def test_parallel_folder_reports_every_file_in_order(self):
        names = [f"img{i}" for i in range(6)]
        for i, name in enumerate(names):
            _write_image(self.dir / f"{name}.png", height=8 + i, width=10 + i)
        outdir = self.dir / "out"
        stdout_before = sys.stdout
        status, out, err = self._run(
            [str(self.dir), "--outdir", str(outdir), "--step", "3", "--jobs", "3"]
        )
        self.assertIs(sys.stdout, stdout_before)
        self.assertEqual(status, 0, err)
        positions = []
        for name in names:
            line = f"Wrote {name}_pixel.png"
            self.assertEqual(out.count(line), 1, name)
            positions.append(out.index(line))
            self.assertTrue((outdir / f"{name}_pixel.png").exists())
        self.assertEqual(positions, sorted(positions))
        self.assertEqual(out.count("=== img"), len(names))

    def test_missing_source(self):
        status, _out, err = self._run([str(self.dir / "nope.png")])
        self.assertEqual(status, 2)
        self.assertIn("not found", err)

    def test_invalid_step_is_rejected_by_parser(self):
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                pixelate.parse_cli_args(["x.png", "--step", "0"])
        self.assertEqual(ctx.exception.code, 2)

    def test_params_from_args(self):
        args = pixelate.parse_cli_args(
            ["x.png", "--step", "7", "--iterations", "0", "--weight", "2.5", "--block-size", "3"]
        )
        params = pixelate.params_from_args(args)
        self.assertEqual(
            (params.step, params.iterations, params.block_size, params.color_weight),
            (7, 0, 3, 2.5),
        )


if __name__ == "__main__":
    unittest.main()
