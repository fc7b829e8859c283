"""State/store layer.

This package is the single source of truth for devices, tasks,
capabilities, templates, targets, the task status ledger and per-device
monitoring buffers. All mutations go through
:class:`pyfleet.state.store.FleetStore`.
"""
