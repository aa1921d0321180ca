"""Pytest configuration and shared fixtures for the orgcst test suite.

This module provides shared fixtures, test configuration, and the hypothesis
profiles used by the property-based tests.
"""

import os

import pytest
from hypothesis import Phase, Verbosity, settings

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=200, verbosity=Verbosity.verbose, deadline=None)
settings.register_profile("dev", max_examples=50, deadline=None)
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate],
    deadline=None,
)

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "fuzzing: Property-based fuzzing tests driven by hypothesis")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")
    config.addinivalue_line("markers", "e2e: End-to-end tests running the installed command")


@pytest.fixture
def sample_org() -> str:
    """Provide a document touching most element kinds."""
    return """#+TITLE: Sample
#+TODO: TODO NEXT | DONE CANCELLED

Intro paragraph with *bold*, /italic/ and =verbatim= text.

* TODO [#A] Plan the release :work:project:
  SCHEDULED: <2025-01-10 Fri> DEADLINE: <2025-01-20 Mon>
  :PROPERTIES:
  :CUSTOM_ID: release
  :END:
  :LOGBOOK:
  CLOCK: [2025-01-05 Sun 10:00]--[2025-01-05 Sun 11:30] =>  1:30
  :END:

** NEXT Write notes
- [X] first item
- [ ] second item
  continued here
- tag :: description

#+NAME: results
| Name | Value |
|------+-------|
| a    | 1     |
#+TBLFM: $2=$1

** DONE Ship it
#+begin_src python :results output
print("hi")
#+end_src

#+begin_quote
Quoted text.
#+end_quote

# A comment
: fixed width

-----

[fn:1] A footnote definition.
"""
