"""Dataset integrations.

Each subdirectory is one dataset with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── models.py         # Frozen dataclasses for loaded records
    ├── parser.py         # Row -> record | rejection
    ├── loader.py         # Rows -> store
    └── source.py         # Where the raw rows come from (file, URL)

Only ``sightings/`` exists today. Analysis code imports the models from here
and never reads files or URLs itself.
"""
