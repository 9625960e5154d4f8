"""siteaudit - test phase planning for website audits.

Turns a selection of audit checks (screenshots, accessibility scans,
content scraping, sitemap generation, ...) into an ordered,
concurrency-annotated execution strategy that an orchestrator can walk.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
