"""Tests for run output directories."""

import json

from imogen.utils.run_manager import RunManager


class TestRunManager:
    """Tests for RunManager and Run."""

    def test_create_run(self, tmp_path):
        run = RunManager(tmp_path).create_run("my target", config={'num_genes': 400})
        assert run.run_dir.parent == tmp_path / "runs"
        assert run.metadata.run_id.endswith("my_target")
        assert run.images_dir.is_dir()
        assert run.logs_dir.is_dir()
        with open(run.run_dir / "config.json") as f:
            assert json.load(f) == {'num_genes': 400}

    def test_unique_directories(self, tmp_path):
        manager = RunManager(tmp_path)
        a = manager.create_run("same")
        b = manager.create_run("same")
        assert a.run_dir != b.run_dir

    def test_complete_and_list(self, tmp_path):
        manager = RunManager(tmp_path)
        run = manager.create_run("target")
        run.save_results({'history': []}, summary={'generation': 3})
        run.complete(summary={'generation': 3})

        (listed,) = manager.list_runs()
        assert listed.metadata.status == "completed"
        assert listed.metadata.summary == {'generation': 3}
        with open(run.run_dir / "results.json") as f:
            assert json.load(f)['_run_id'] == run.metadata.run_id

    def test_get_missing_run(self, tmp_path):
        assert RunManager(tmp_path).get_run("nope") is None

    def test_cleanup_dry_run(self, tmp_path):
        manager = RunManager(tmp_path)
        for i in range(3):
            manager.create_run(f"run{i}")
        deleted = manager.cleanup_old_runs(keep_count=1)
        assert len(deleted) == 2
        assert len(manager.list_runs()) == 3
        manager.cleanup_old_runs(keep_count=1, dry_run=False)
        assert len(manager.list_runs()) == 1
