"""Sphinx configuration for the Q-Foods ordering service documentation."""

from __future__ import annotations

import os
import sys
from datetime import datetime

SERVICE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, SERVICE_DIR)


project = "Q-Foods Ordering Service"
author = "Q-Foods Backend Team"
copyright = f"{datetime.now():%Y}, {author}"
release = "0.1.0"

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
    "sphinx_autodoc_typehints",
]

autodoc_typehints = "description"
autodoc_member_order = "bysource"
napoleon_google_docstring = True
napoleon_numpy_docstring = False

exclude_patterns: list[str] = ["_build", "Thumbs.db", ".DS_Store"]

master_doc = "index"
html_theme = "alabaster"
html_title = f"{project} {release}"
