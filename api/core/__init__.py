"""
Shared, cross-cutting code for the API.

`core/` holds the building blocks every feature uses: settings, the storage
client, key naming, field coercion and the query helpers. Feature-specific
SQL and business logic stay in the feature package (e.g. `tasks/`).
"""
