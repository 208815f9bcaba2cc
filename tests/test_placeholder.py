"""Placeholder test verifying package import."""


def test_import() -> None:
    """Verify top-level package is importable."""
    import doc_cursor

    assert doc_cursor.__version__ is not None
    assert doc_cursor.__version__ == "0.1.0"
