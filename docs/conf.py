"""Sphinx configuration for SmartGate documentation."""
import sys
from pathlib import Path

# Add source directory to path for autodoc
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

# Project information
project = "SmartGate"
copyright = "2025, Genropy Team"
author = "Genropy Team"
release = "0.1.0"
version = "0.1"

# General configuration
extensions = [
    "sphinx.ext.autodoc",           # Auto-generate docs from docstrings
    "sphinx.ext.napoleon",          # Google/NumPy style docstrings
    "sphinx.ext.viewcode",          # Add links to source code
    "sphinx.ext.intersphinx",       # Link to other projects' docs
    "sphinx_autodoc_typehints",     # Type hints in docs
    "myst_parser",                  # Markdown support
    "sphinxcontrib.mermaid",        # Mermaid diagrams (authorization flow)
]

myst_enable_extensions = [
    "colon_fence",
    "deflist",
]
myst_heading_anchors = 3
myst_fence_as_directive = ["mermaid"]

source_suffix = {
    ".rst": "restructuredtext",
    ".md": "markdown",
}

master_doc = "index"

exclude_patterns = [
    "_build",
    "Thumbs.db",
    ".DS_Store",
]

suppress_warnings = [
    "toc.not_included",
    "myst.xref_missing",
]

# HTML output configuration
html_theme = "sphinx_rtd_theme"
html_theme_options = {
    "navigation_depth": 3,
    "collapse_navigation": False,
    "sticky_navigation": True,
}
html_static_path = []

html_context = {
    "display_github": True,
    "github_user": "genropy",
    "github_repo": "smartgate",
    "github_version": "main",
    "conf_py_path": "/docs/",
}

# Autodoc configuration
autodoc_default_options = {
    "members": True,
    "member-order": "bysource",
    "special-members": "__init__",
    "exclude-members": "__weakref__",
}
autodoc_typehints = "description"

# Napoleon settings (Google-style docstrings)
napoleon_google_docstring = True
napoleon_numpy_docstring = False
napoleon_include_init_with_doc = True

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "pydantic": ("https://docs.pydantic.dev/latest/", None),
}

typehints_fully_qualified = False
always_document_param_types = True
