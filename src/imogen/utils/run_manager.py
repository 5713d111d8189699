"""Output directories for evolution runs.

Directory Structure:
    output/
        runs/
            YYYYMMDD_HHMMSS_<description>/
                metadata.json     # Run id, status, summary
                config.json       # Settings the run used
                results.json      # History and best creature
                images/           # Saved renders and plots
                logs/             # run.log
"""

import json
import shutil
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class RunMetadata:
    """Metadata for a run."""
    run_id: str
    description: str
    created_at: str
    completed_at: Optional[str] = None
    status: str = "running"
    config: Optional[Dict[str, Any]] = None
    summary: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'RunMetadata':
        return cls(**{k: v for k, v in d.items() if k in cls.__dataclass_fields__})


class RunManager:
    """Creates and lists timestamped run directories."""

    def __init__(self, base_dir: Optional[Path] = None):
        """Initialize run manager.

        Args:
            base_dir: Base directory for outputs. Defaults to ./output
        """
        self.base_dir = Path(base_dir) if base_dir is not None else Path("output")
        self.runs_dir = self.base_dir / "runs"
        self.runs_dir.mkdir(parents=True, exist_ok=True)

    def create_run(
        self,
        description: str,
        config: Optional[Dict[str, Any]] = None,
    ) -> 'Run':
        """Create a new run with a timestamped directory.

        Args:
            description: Short description (used in directory name)
            config: Configuration dictionary to save

        Returns:
            Run object for managing this run
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        safe_desc = description.replace(" ", "_").replace("/", "-")[:30]
        run_id = f"{timestamp}_{safe_desc}"

        run_dir = self.runs_dir / run_id
        suffix = 1
        while run_dir.exists():
            suffix += 1
            run_dir = self.runs_dir / f"{run_id}_{suffix}"
        run_dir.mkdir(parents=True)
        (run_dir / "images").mkdir()
        (run_dir / "logs").mkdir()

        metadata = RunMetadata(
            run_id=run_dir.name,
            description=description,
            created_at=datetime.now().isoformat(),
            config=config,
        )

        run = Run(run_dir, metadata)
        run._save_metadata()
        if config:
            run.save_config(config)

        return run

    def get_run(self, run_id: str) -> Optional['Run']:
        """Get an existing run by ID, or None if there is no such directory."""
        run_dir = self.runs_dir / run_id
        metadata_file = run_dir / "metadata.json"
        if not metadata_file.exists():
            return None

        with open(metadata_file) as f:
            metadata = RunMetadata.from_dict(json.load(f))
        return Run(run_dir, metadata)

    def list_runs(self, limit: int = 20) -> List['Run']:
        """List runs, most recent first."""
        runs: List['Run'] = []

        # Directory names start with the timestamp
        for run_dir in sorted(self.runs_dir.iterdir(), reverse=True):
            if not run_dir.is_dir():
                continue
            run = self.get_run(run_dir.name)
            if run is None:
                continue
            runs.append(run)
            if len(runs) >= limit:
                break

        return runs

    def cleanup_old_runs(self, keep_count: int = 10, dry_run: bool = True) -> List[str]:
        """Remove old runs, keeping the most recent ``keep_count``.

        Returns:
            List of run IDs that were/would be deleted
        """
        runs = self.list_runs(limit=1000)
        deleted = []
        for run in runs[keep_count:]:
            if not dry_run:
                shutil.rmtree(run.run_dir)
            deleted.append(run.metadata.run_id)
        return deleted


class Run:
    """A single evolution run's output directory."""

    def __init__(self, run_dir: Path, metadata: RunMetadata):
        self.run_dir = Path(run_dir)
        self.metadata = metadata

    @property
    def images_dir(self) -> Path:
        return self.run_dir / "images"

    @property
    def logs_dir(self) -> Path:
        return self.run_dir / "logs"

    @property
    def log_path(self) -> Path:
        return self.logs_dir / "run.log"

    def _save_metadata(self):
        with open(self.run_dir / "metadata.json", "w") as f:
            json.dump(self.metadata.to_dict(), f, indent=2)

    def save_config(self, config: Dict[str, Any]):
        """Save configuration to config.json."""
        self.metadata.config = config
        with open(self.run_dir / "config.json", "w") as f:
            json.dump(config, f, indent=2)
        self._save_metadata()

    def save_results(self, results: Dict[str, Any], summary: Optional[Dict[str, Any]] = None):
        """Save results to results.json.

        Args:
            results: Full results dictionary
            summary: Optional summary kept in the metadata for quick listing
        """
        results["_run_id"] = self.metadata.run_id
        results["_created_at"] = self.metadata.created_at
        results["_completed_at"] = datetime.now().isoformat()

        with open(self.run_dir / "results.json", "w") as f:
            json.dump(results, f, indent=2)

        if summary:
            self.metadata.summary = summary
            self._save_metadata()

    def get_image_path(self, name: str, format: str = "png") -> Path:
        return self.images_dir / f"{name}.{format}"

    def complete(self, status: str = "completed", summary: Optional[Dict[str, Any]] = None):
        """Mark run as complete.

        Args:
            status: Final status (completed, failed, cancelled)
            summary: Optional summary of results
        """
        self.metadata.status = status
        self.metadata.completed_at = datetime.now().isoformat()
        if summary:
            self.metadata.summary = summary
        self._save_metadata()

    def __repr__(self) -> str:
        return f"Run({self.metadata.run_id}, status={self.metadata.status})"
