"""Query layer.

Pure functions over store snapshots: filtered/sorted/paginated queries
(:mod:`pyfleet.query.engine`) and derived aggregations
(:mod:`pyfleet.query.views`). Nothing here mutates or caches state.
"""
