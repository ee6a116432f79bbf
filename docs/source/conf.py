# Sphinx configuration for the datacleaning API reference.

import os
import sys

# autodoc imports the package from src/
sys.path.insert(0, os.path.abspath("../../src"))

# ---------------------------------------------------------------------------
# Project information
# ---------------------------------------------------------------------------
project = "Cafe Sales & Data Jobs Cleaning"
copyright = "2026, datacleaning contributors"
author = "datacleaning contributors"
release = "1.0.0"

# ---------------------------------------------------------------------------
# General configuration
# ---------------------------------------------------------------------------
extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.doctest",
    "sphinx.ext.napoleon",
]

autodoc_member_order = "bysource"
exclude_patterns = ["_build"]

# ---------------------------------------------------------------------------
# HTML output
# ---------------------------------------------------------------------------
html_theme = "alabaster"
