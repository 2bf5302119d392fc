"""
permitrack
==========

Work‑permit life‑cycle tracking for expatriate staff: permit status,
onboarding / renewal processes, document checklists and expiry
reminders.

Import structure
----------------
`import permitrack` is intentionally cheap: only the core sub‑modules
are pure Python plus *pydantic*.  *matplotlib* is only imported when
you explicitly access :pymod:`permitrack.viz`.

Sub‑modules
~~~~~~~~~~~
- :pymod:`permitrack.models`     – ``Expat`` / ``Permit`` / ``Process`` dataclasses + enums
- :pymod:`permitrack.status`     – permit status derivation and expiry reminders
- :pymod:`permitrack.lifecycle`  – process state machine and document checklist
- :pymod:`permitrack.reports`    – dashboard and process report projections
- :pymod:`permitrack.registry`   – ``ExpatRegistry`` command surface
- :pymod:`permitrack.serialize`  – JSON conversion
- :pymod:`permitrack.viz`        – plotting helpers

Quick start
-----------
>>> from permitrack.registry import ExpatRegistry
>>> reg = ExpatRegistry()
>>> e = reg.add_expat({"name": "Sofia Rossi", "nationality": "Italy",
...                    "job_title": "Designer", "department": "Product"})
>>> reg.advance_step(e.id, "onboarding").onboarding_process.current_stage.value
'Vendor Submission'
"""

__all__ = [
    "models",
    "status",
    "lifecycle",
    "reports",
    "registry",
    "serialize",
    "viz",
]

__version__ = "0.1.0"
