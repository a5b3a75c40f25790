"""End-to-end tests of the lk-flow command line."""
import numpy as np
import pytest
from PIL import Image

from lk_flow.cli import main


def _frames(n, shape=(40, 48), seed=0):
    rng = np.random.default_rng(seed)
    base = (rng.random(shape) * 255).astype(np.uint8)
    return [np.roll(base, i, axis=1) for i in range(n)]


class TestCli:
    """Run the CLI against PNG frames on disk."""

    def test_writes_one_image_per_pair(self, write_frames, tmp_path):
        in_dir = write_frames(_frames(3))
        out_dir = tmp_path / 'frames_output'
        code = main([str(in_dir), str(out_dir), '--pattern', 'frame_{:04d}.png', '-q'])
        assert code == 0
        assert sorted(p.name for p in out_dir.iterdir()) == ['flow_0001.jpg', 'flow_0002.jpg']
        with Image.open(out_dir / 'flow_0001.jpg') as img:
            assert img.size == (48, 40)

    def test_size_mismatch_exit_code(self, write_frames, tmp_path):
        frames = _frames(2) + [np.zeros((20, 20), dtype=np.uint8)]
        in_dir = write_frames(frames)
        out_dir = tmp_path / 'frames_output'
        code = main([str(in_dir), str(out_dir), '--pattern', 'frame_{:04d}.png', '-q'])
        assert code == 1
        assert [p.name for p in out_dir.iterdir()] == ['flow_0001.jpg']

    def test_options(self, write_frames, tmp_path):
        in_dir = write_frames(_frames(4))
        out_dir = tmp_path / 'out'
        code = main([
            str(in_dir), str(out_dir), '--pattern', 'frame_{:04d}.png',
            '--output-pattern', 'lk_{:03d}.png', '--max-frames', '2',
            '--window-size', '7', '--stride', '5', '--color', '255,0,0',
            '--save-flo', '-q',
        ])
        assert code == 0
        assert sorted(p.name for p in out_dir.iterdir()) == ['lk_001.flo', 'lk_001.png']

    def test_empty_input_dir(self, tmp_path):
        (tmp_path / 'in').mkdir()
        assert main([str(tmp_path / 'in'), str(tmp_path / 'out'), '-q']) == 0

    @pytest.mark.parametrize('args', [
        ['--window-size', '4'],
        ['--max-frames', '0'],
        ['--stride', '0'],
        ['--color', '1,2'],
        ['--method', 'hs'],
        ['--pattern', 'frame.jpg'],
        ['--pattern', 'frame_{name}.jpg'],
        ['--output-pattern', 'flow.jpg'],
    ])
    def test_bad_arguments(self, tmp_path, args):
        with pytest.raises(SystemExit) as exc:
            main([str(tmp_path), str(tmp_path / 'out')] + args)
        assert exc.value.code == 2
