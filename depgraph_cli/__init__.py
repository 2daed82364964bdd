"""DepGraph CLI: dependency graph analysis and commit gating for TypeScript trees."""

__version__ = "0.3.0"
