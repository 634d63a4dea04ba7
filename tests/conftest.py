"""Shared fixtures: a small catalog in the published JSON layout."""

import sys
from pathlib import Path

import pytest


ROOT_DIR = Path(__file__).resolve().parent.parent
ROOT_PATH = str(ROOT_DIR)

if ROOT_PATH not in sys.path:
    sys.path.insert(0, ROOT_PATH)

from fpb_search.catalog.indexer import flatten_catalog  # noqa: E402
from fpb_search.search.engine import FuzzySearch  # noqa: E402


def book(title, author="", url=None):
    return {"author": author, "title": title, "url": url or f"https://example.org/{title}"}


@pytest.fixture
def raw_catalog():
    return {
        "documents": [
            {
                "language": {"code": "en", "name": "English", "isSubject": False},
                "sections": [
                    {
                        "section": "Android",
                        "entries": [book("Kotlin Basics", "A")],
                        "subsections": [],
                    },
                    {
                        "section": "C",
                        "entries": [book("The C Programming Language", "Brian Kernighan")],
                        "subsections": [],
                    },
                    {
                        "section": "Python",
                        "entries": [book("Automate the Boring Stuff with Python", "Al Sweigart")],
                        "subsections": [
                            {"section": "Django", "entries": [book("Django Girls Tutorial", "Ray")]},
                        ],
                    },
                ],
            },
            {
                "language": {"code": "en", "name": "English", "isSubject": True},
                "sections": [
                    {
                        "section": "Algorithms & Data Structures",
                        "entries": [book("Algorithms", "Jeff Erickson")],
                        "subsections": [],
                    },
                ],
            },
            {
                "language": {"code": "es", "name": "Spanish", "isSubject": False},
                "sections": [
                    {
                        "section": "Python",
                        "entries": [book("Python para todos", "Raúl González Duque")],
                        "subsections": [],
                    },
                ],
            },
        ]
    }


@pytest.fixture
def flat(raw_catalog):
    return flatten_catalog(raw_catalog)


@pytest.fixture
def engine(flat):
    return FuzzySearch(flat.entries)
