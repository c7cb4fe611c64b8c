import textwrap

def dedent_strip(text: str) -> str:
    """
    Multi-line strings in Python are indented.
    This function removes the common indent and trims leading/trailing whitespace.
    Used for the estimator briefs and for expected markdown in the tests.
    """
    return textwrap.dedent(text).strip()
