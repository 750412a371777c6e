import nox  # type: ignore[import]


@nox.session(python=False)
def run(session):
    session.run("python", "main.py", *session.posargs)


@nox.session
def tests(session):
    session.install("-e", ".[test]")
    session.run("pytest", *session.posargs)


@nox.session
def lint(session):
    session.install("ruff", "black")
    session.run("ruff", "check", ".")
    session.run("black", "--check", ".")


@nox.session
def format(session):
    session.install("black")
    session.run("black", ".")


@nox.session
def typecheck(session):
    session.install("mypy", "-e", ".")
    session.run("mypy", "zoompicture")


@nox.session
def test_watch(session):
    """테스트 자동 재실행."""
    session.install("-e", ".[test]")
    session.install("pytest-watch")
    session.run("ptw", "-q", external=True)
