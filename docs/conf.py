# docs/conf.py
# Sphinx configuration for the pfmerge API documentation
# RELEVANT FILES: docs/index.md, pyproject.toml, python/pfmerge/__init__.py

import sys
import os

# Add Python source to path for autodoc
sys.path.insert(0, os.path.abspath('../python'))

import pfmerge  # noqa: E402

project = 'pfmerge'
copyright = '2025, pfmerge contributors'
author = 'pfmerge contributors'

release = pfmerge.__version__
version = '.'.join(release.split('.')[:2])

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.autosummary',
    'sphinx.ext.viewcode',
    'sphinx.ext.napoleon',
    'sphinx.ext.intersphinx',
    'myst_parser',
]

source_suffix = {
    '.rst': 'restructuredtext',
    '.md': 'markdown',
}

# Modules use NumPy-style sections
napoleon_google_docstring = False
napoleon_numpy_docstring = True

autodoc_default_options = {
    'members': True,
    'member-order': 'bysource',
    'undoc-members': True,
}
autosummary_generate = True

intersphinx_mapping = {
    'python': ('https://docs.python.org/3', None),
    'numpy': ('https://numpy.org/doc/stable/', None),
    'PIL': ('https://pillow.readthedocs.io/en/stable/', None),
}

exclude_patterns = ['_build', 'Thumbs.db', '.DS_Store']

html_title = 'pfmerge Documentation'
html_short_title = 'pfmerge'

_HERE = os.path.dirname(__file__)
html_static_path = ['_static'] if os.path.isdir(os.path.join(_HERE, '_static')) else []
