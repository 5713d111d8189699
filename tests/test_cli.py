"""Tests for the command-line interface."""

import json

import numpy as np
import pytest
from PIL import Image

from imogen.cli import main
from imogen.utils.run_manager import RunManager


@pytest.fixture
def target_file(tmp_path):
    data = np.zeros((30, 60, 3), dtype=np.uint8)
    data[:, :30] = (240, 240, 20)
    path = tmp_path / "target.png"
    Image.fromarray(data).save(path)
    return path


def evolve_args(target_file, output_dir, *extra):
    return [
        "evolve", str(target_file),
        "--generations", "3",
        "--render-width", "50",
        "--population-size", "6",
        "--num-genes", "50",
        "--output-width", "100",
        "--seed", "5",
        "--save-interval", "2",
        "--output-dir", str(output_dir),
        *extra,
    ]


class TestEvolve:
    """Tests for the evolve command."""

    def test_evolve_writes_run(self, target_file, tmp_path):
        output_dir = tmp_path / "out"
        assert main(evolve_args(target_file, output_dir)) == 0

        (run,) = RunManager(output_dir).list_runs()
        assert run.metadata.status == "completed"
        assert run.metadata.summary['generation'] == 3
        assert run.get_image_path("best").exists()
        assert run.get_image_path("best_gen_00002").exists()
        assert run.get_image_path("fitness_history").exists()
        assert run.log_path.exists()

        with open(run.run_dir / "results.json") as f:
            results = json.load(f)
        assert [r['generation'] for r in results['history']] == [1, 2, 3]
        assert len(results['best']['genome']) > 0

        with open(run.run_dir / "config.json") as f:
            assert json.load(f)['population_size'] == 6

    def test_config_file(self, target_file, tmp_path):
        config = tmp_path / "settings.json"
        config.write_text(json.dumps({'population_size': 9, 'num_genes': 60}))
        output_dir = tmp_path / "out"
        assert main(evolve_args(target_file, output_dir, "--config", str(config))) == 0
        (run,) = RunManager(output_dir).list_runs()
        # Command-line values override the file
        assert run.metadata.config['population_size'] == 6
        assert run.metadata.config['num_genes'] == 50

    def test_invalid_setting(self, target_file, tmp_path):
        args = evolve_args(target_file, tmp_path / "out")
        args[args.index("--population-size") + 1] = "1"
        assert main(args) == 1

    def test_missing_target(self, tmp_path):
        output_dir = tmp_path / "out"
        assert main(evolve_args(tmp_path / "missing.png", output_dir)) == 1
        (run,) = RunManager(output_dir).list_runs()
        assert run.metadata.status == "failed"
        assert run.metadata.completed_at is not None

    def test_zero_save_interval(self, target_file, tmp_path):
        output_dir = tmp_path / "out"
        args = evolve_args(target_file, output_dir)
        args[args.index("--save-interval") + 1] = "0"
        assert main(args) == 1
        assert not output_dir.exists()

    def test_negative_generations(self, target_file, tmp_path):
        args = evolve_args(target_file, tmp_path / "out")
        args[args.index("--generations") + 1] = "-1"
        assert main(args) == 1


class TestRender:
    """Tests for the render command."""

    def test_render_genome_list(self, tmp_path):
        genome = tmp_path / "genome.json"
        genome.write_text(json.dumps([1, 0, 0, 1, 0.0, 0, 0, 1, 0, 0, 1]))
        output = tmp_path / "render.png"
        assert main(["render", str(genome), "--width", "30", "--height", "20", "-o", str(output)]) == 0
        with Image.open(output) as image:
            assert image.size == (30, 20)

    def test_render_results_file(self, target_file, tmp_path):
        output_dir = tmp_path / "out"
        main(evolve_args(target_file, output_dir))
        (run,) = RunManager(output_dir).list_runs()
        output = tmp_path / "render.png"
        assert main(["render", str(run.run_dir / "results.json"), "-o", str(output)]) == 0
        assert output.exists()


class TestMisc:
    """Tests for listing runs and usage."""

    def test_no_command(self):
        assert main([]) == 1

    def test_runs(self, target_file, tmp_path, capsys):
        output_dir = tmp_path / "out"
        main(evolve_args(target_file, output_dir))
        assert main(["runs", "--output-dir", str(output_dir)]) == 0
        assert "completed" in capsys.readouterr().out

    def test_runs_empty(self, tmp_path, capsys):
        assert main(["runs", "--output-dir", str(tmp_path)]) == 0
        assert "No runs found" in capsys.readouterr().out

    def test_runs_cleanup(self, tmp_path, capsys):
        manager = RunManager(tmp_path)
        for i in range(3):
            manager.create_run(f"run{i}")

        assert main(["runs", "--output-dir", str(tmp_path), "--cleanup", "1", "--dry-run"]) == 0
        assert "Would delete 2 runs" in capsys.readouterr().out
        assert len(manager.list_runs()) == 3

        assert main(["runs", "--output-dir", str(tmp_path), "--cleanup", "1"]) == 0
        assert "Deleted 2 runs" in capsys.readouterr().out
        assert len(manager.list_runs()) == 1

    def test_runs_cleanup_negative(self, tmp_path):
        assert main(["runs", "--output-dir", str(tmp_path), "--cleanup", "-1"]) == 1
