"""
tests/test_viz.py
=================

Smoke tests for the PNG chart helpers.
"""

import matplotlib

matplotlib.use("Agg")

from conftest import TODAY  # noqa: E402
from permitrack import viz  # noqa: E402
from permitrack.models import ProcessType  # noqa: E402
from permitrack.seed import demo_roster  # noqa: E402


def test_status_summary_writes_png(tmp_path):
    out = viz.status_summary(demo_roster(TODAY), out_path=tmp_path / "status.png")
    assert out.exists() and out.stat().st_size > 0


def test_pipeline_chart_writes_png(tmp_path):
    out = viz.pipeline_chart(demo_roster(TODAY), ProcessType.RENEWAL, out_path=tmp_path / "renewal.png")
    assert out.exists() and out.read_bytes()[:4] == b"\x89PNG"
