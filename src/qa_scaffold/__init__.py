"""Opinionated code-quality scaffolding for Node.js, React and Next.js projects."""

__version__ = "0.1.0"
