"""Tests for the Celery app and its beat schedule."""

import json
import os
import subprocess
import sys
from pathlib import Path

from clausewise.workers.celery_app import create_celery_app

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def test_beat_schedule_runs_the_sweep():
    app = create_celery_app("redis://broker:6379/1", 15)

    entry = app.conf.beat_schedule["cleanup-expired-contracts"]
    assert entry["task"] == "retention.cleanup_expired_contracts"
    assert entry["schedule"] == 900.0
    assert entry["options"] == {"expires": 900}
    assert app.conf.broker_url == "redis://broker:6379/1"


def test_worker_module_imports_without_app_secrets():
    env = {
        key: value
        for key, value in os.environ.items()
        if key not in {"DATABASE_URL", "JWT_SECRET"}
    }
    env["PYTHONPATH"] = str(PROJECT_ROOT)
    env["SWEEP_SCHEDULE_MINUTES"] = "30"
    script = (
        "import json\n"
        "from clausewise.workers.celery_app import celery_app\n"
        "entry = celery_app.conf.beat_schedule['cleanup-expired-contracts']\n"
        "print(json.dumps({'schedule': entry['schedule'], 'broker': celery_app.conf.broker_url}))\n"
    )

    completed = subprocess.run(
        [sys.executable, "-c", script],
        env=env,
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        check=True,
    )

    loaded = json.loads(completed.stdout.strip().splitlines()[-1])
    assert loaded["schedule"] == 1800.0
