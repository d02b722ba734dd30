"""
Shared, cross-cutting code for the API.

`core/` holds the building blocks every feature uses: DB wiring and
transactions, table descriptors, the generic DBI, the filter/query builder,
errors and logging. Keep entity-specific SQL and business logic in the
corresponding feature package (e.g. `performers/`).
"""
