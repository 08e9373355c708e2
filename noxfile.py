import nox

nox.options.reuse_existing_virtualenvs = True


@nox.session
def test(session):
    """Run the test suite"""
    session.install(".[test]")
    session.run("pytest", *session.posargs)


@nox.session
def mktree(session):
    """Create a sample directory tree from a JSON layout"""
    session.install(".")
    session.run("sha256all-mktree", *session.posargs)


@nox.session
def timings(session):
    """
    Run sha256all over a directory tree once per implementation, appending a
    report line for each run to timings.jsonl
    """
    session.install(".")
    for impl in ["threads", "interleave", "trio"]:
        session.run(
            "sha256all",
            "--buffer",
            "--implementation",
            impl,
            "--report",
            "timings.jsonl",
            *session.posargs,
            silent=True,
        )
