"""Nox sessions for testing across supported Python versions."""

import nox

nox.options.sessions = ["tests"]


@nox.session(python=["3.11", "3.12", "3.13"])
def tests(session):
    """Run the test suite with pytest."""
    session.install(".[test]")
    session.run("pytest", "tests/", "-q", *session.posargs)


@nox.session(python=["3.11", "3.12", "3.13"])
def type_check(session):
    """Run mypy type checking."""
    session.install(".[dev]")
    session.run("mypy", "src/hsc_fetch", *session.posargs)
