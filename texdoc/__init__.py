"""texdoc — assemble LaTeX documents from typed content elements.

- schema: element models, numeric formatting, YAML document loader
- generator: DocumentBuilder, chart serialization, renderer collaborator
- processor: data-file ingestion for tables and charts
- cli: command-line entry point
"""

__version__ = "0.1.0"
