from __future__ import annotations

import os
import sys


sys.path.insert(0, os.path.abspath(".."))

project = "macroeconometrics"
author = "macroeconometrics developers"

try:
    import macroeconometrics

    release = macroeconometrics.__version__
except Exception:
    release = "0.0.0"

extensions = [
    "myst_parser",
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx.ext.intersphinx",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
    "sphinx_autodoc_typehints",
    "sphinx_copybutton",
    "sphinx_design",
]

autosummary_generate = True

source_suffix = {
    ".md": "markdown",
}

myst_enable_extensions = [
    "colon_fence",
    "dollarmath",
    "amsmath",
]

exclude_patterns = ["_build", "Thumbs.db", ".DS_Store"]

html_theme = "furo"

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", {}),
    "numpy": ("https://numpy.org/doc/stable/", {}),
    "pandas": ("https://pandas.pydata.org/docs/", {}),
    "scipy": ("https://docs.scipy.org/doc/scipy/", {}),
}

napoleon_google_docstring = True
napoleon_numpy_docstring = True
