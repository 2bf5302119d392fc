"""
tests/test_reports.py
=====================

Unit tests for the dashboard and process report projections.
"""

from conftest import TODAY, iso, make_expat
from permitrack.lifecycle import (
    advance_step,
    initiate_onboarding,
    initiate_renewal,
    update_physical_document_status,
)
from permitrack.models import (
    PIPELINE_STAGES,
    DocumentCategory,
    PermitStatus,
    PhysicalDocumentStatus as Doc,
    ProcessStage,
    ProcessType,
)
from permitrack.reports import (
    average_stage_durations,
    dashboard_stats,
    nationality_distribution,
    outstanding_physical_documents,
    pipeline_counts,
    report_metrics,
    search_expats,
    status_by_nationality,
    status_distribution,
    transition_key,
)
from permitrack.seed import demo_roster
from permitrack.status import refresh_statuses


def _roster():
    return refresh_statuses([
        make_expat("1", "Ann", "Japan", expires_in=30),
        make_expat("2", "Bob", "India", expires_in=-3),
        make_expat("3", "Cid", "India", expires_in=300),
        make_expat("4", "Dee", "India"),
        make_expat("5", "Eve", "France", expires_in=400),
    ], 60, TODAY)


def test_status_distribution_sums_to_total():
    for roster in (_roster(), demo_roster(TODAY), ()):
        stats = status_distribution(roster)
        assert sum(stats.counts.values()) == stats.total == len(roster)


def test_status_distribution_counts():
    stats = status_distribution(_roster())
    assert stats.counts[PermitStatus.ACTIVE] == 2
    assert stats.counts[PermitStatus.EXPIRES_SOON] == 1
    assert stats.counts[PermitStatus.EXPIRED] == 1
    assert stats.counts[PermitStatus.IN_PROCESS] == 1
    assert stats.as_dict()["total"] == 5


def test_nationality_sorted_descending():
    assert list(nationality_distribution(_roster()).items())[0] == ("India", 3)
    matrix = status_by_nationality(_roster())
    assert list(matrix)[0] == "India"
    assert matrix["India"].total == 3
    assert matrix["India"].counts[PermitStatus.EXPIRED] == 1


def test_pipeline_counts_by_process_type():
    at_vendor = advance_step(initiate_onboarding(iso(-5)), TODAY)
    roster = [
        make_expat("1", onboarding_process=initiate_onboarding(TODAY)),
        make_expat("2", onboarding_process=at_vendor),
        make_expat("3", renewal_process=initiate_renewal(TODAY)),
        make_expat("4"),
    ]
    onboarding = pipeline_counts(roster, ProcessType.ONBOARDING)
    assert list(onboarding) == list(PIPELINE_STAGES)
    assert onboarding[ProcessStage.DOC_COLLECTION] == 1
    assert onboarding[ProcessStage.VENDOR_SUBMISSION] == 1
    assert pipeline_counts(roster, ProcessType.RENEWAL)[ProcessStage.DOC_COLLECTION] == 1
    assert ProcessStage.NOT_STARTED not in onboarding and ProcessStage.COMPLETE not in onboarding


def test_outstanding_documents_use_active_process():
    p = initiate_onboarding(TODAY)
    for doc in p.physical_documents:
        p = update_physical_document_status(p, doc.name, Doc.VERIFIED)
    done = make_expat("1", onboarding_process=p, renewal_process=initiate_renewal(TODAY))
    pending = make_expat("2", renewal_process=update_physical_document_status(
        initiate_renewal(TODAY), DocumentCategory.PASSPORT, Doc.VERIFIED))

    rows = outstanding_physical_documents([done, pending, make_expat("3")])
    assert [r.expat_id for r in rows] == ["2"]
    assert rows[0].process is ProcessType.RENEWAL
    assert DocumentCategory.PASSPORT not in [d.name for d in rows[0].outstanding]
    assert len(rows[0].outstanding) == 5


def test_average_durations_pool_processes():
    # the completed step is stamped with the day it was left
    a = advance_step(advance_step(initiate_onboarding(iso(-20)), iso(-10)), iso(0))
    b = advance_step(advance_step(initiate_renewal(iso(-40)), iso(-21)), iso(-1))
    averages = average_stage_durations([
        make_expat("1", onboarding_process=a),
        make_expat("2", renewal_process=b),
    ])
    submit = transition_key(ProcessStage.DOC_COLLECTION, ProcessStage.VENDOR_SUBMISSION)
    assert submit == "Document Collection → Vendor Submission"
    assert averages[submit] == 15
    approval = transition_key(ProcessStage.VENDOR_SUBMISSION, ProcessStage.GOVT_APPROVAL)
    assert averages[approval] == 0
    issued = transition_key(ProcessStage.GOVT_APPROVAL, ProcessStage.PERMIT_ISSUED)
    assert averages[issued] is None


def test_report_metrics_on_demo_roster():
    m = report_metrics(demo_roster(TODAY))
    assert m.in_onboarding == 2
    assert m.in_renewal == 2
    assert m.onboarding_pipeline[ProcessStage.GOVT_APPROVAL] == 1
    assert m.renewal_pipeline[ProcessStage.VENDOR_SUBMISSION] == 1
    # Doc Collection → Vendor Submission: 30 days (Miller) and 28 days (Al‑Farsi)
    assert m.avg_time_to_submit == 29
    assert {r.expat_name for r in m.outstanding_documents} == {
        "Aarav Sharma", "David Miller", "Sofia Rossi", "Omar Al-Farsi"}


def test_dashboard_stats_bundle():
    stats = dashboard_stats(_roster())
    assert stats.statuses.total == 5
    assert stats.nationalities["France"] == 1


def test_search_matches_name_nationality_title():
    roster = _roster()
    assert [e.id for e in search_expats(roster, "india")] == ["2", "3", "4"]
    assert [e.id for e in search_expats(roster, "ANN")] == ["1"]
    assert len(search_expats(roster, "engineer")) == 5


def test_average_durations_round_halves_up():
    a = advance_step(advance_step(initiate_onboarding(iso(-20)), iso(-10)), iso(0))
    b = advance_step(advance_step(initiate_onboarding(iso(-20)), iso(-12)), iso(-1))
    averages = average_stage_durations([
        make_expat("1", onboarding_process=a),
        make_expat("2", onboarding_process=b),
    ])
    submit = transition_key(ProcessStage.DOC_COLLECTION, ProcessStage.VENDOR_SUBMISSION)
    assert averages[submit] == 11
