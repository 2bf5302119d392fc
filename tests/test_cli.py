"""
tests/test_cli.py
=================

Command line front end over the demo roster and a roster file.
"""

import pytest

from conftest import TODAY, make_expat
from permitrack.cli import main
from permitrack.serialize import save_roster


def test_status_on_demo_roster(capsys):
    assert main(["--today", TODAY.isoformat(), "status"]) == 0
    out = capsys.readouterr().out
    assert "Kenji Tanaka" in out
    assert "total: 11" in out


def test_notifications_from_roster_file(tmp_path, capsys):
    path = save_roster(tmp_path / "r.json", [make_expat("a", "Ann", expires_in=20),
                                              make_expat("b", "Bob", expires_in=-2)])
    main(["--roster", str(path), "--today", TODAY.isoformat(), "--lead-time", "30", "notifications"])
    out = capsys.readouterr().out
    assert "Permit for Ann expires in 20 days." in out
    assert "Bob" not in out


def test_report_prints_pipelines(capsys):
    main(["--today", TODAY.isoformat(), "report"])
    out = capsys.readouterr().out
    assert "Onboarding pipeline" in out
    assert "Document Collection → Vendor Submission" in out


def test_missing_roster_exits(tmp_path):
    with pytest.raises(SystemExit):
        main(["--roster", str(tmp_path / "missing.json"), "status"])
