"""Document rendering for pipeline results.

Each document lives in its own submodule so the design phase can use the
shared template renderer without pulling in every phase model:

- :mod:`src.reporter.srs` -- ``srs.md``, the full requirements document
- :mod:`src.reporter.project_plan` -- ``project-plan.md``
- :mod:`src.reporter.risk_register` -- ``risk-register.md``
- :mod:`src.reporter.adr` -- one ``ADR-NNN-<slug>.md`` per decision
- :mod:`src.reporter.exporters` -- JSON / YAML / Markdown dumps of any phase output
- :mod:`src.reporter.templates` -- the Jinja2 renderer behind all of them
"""
