# Configuration file for the Sphinx documentation builder.
#
# This file only contains a selection of the most common options. For a full
# list see the documentation:
# https://www.sphinx-doc.org/en/master/usage/configuration.html

# -- Path setup --------------------------------------------------------------

# If extensions (or modules to document with autodoc) are in another directory,
# add these directories to sys.path here. If the directory is relative to the
# documentation root, use os.path.abspath to make it absolute, like shown here.
#
# The package is normally installed (``pip install -e .[docs]``) before building
# the docs. Fall back to the source tree so that autodoc works from a checkout.
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join('..', 'src')))

from magicmethods import __version__  # noqa: E402

# -- Project information -----------------------------------------------------

project = 'magicmethods'
copyright = '2021'
author = 'magicmethods contributors'

# The full version, including alpha/beta/rc tags
release = __version__


# -- General configuration ---------------------------------------------------

# Add any Sphinx extension module names here, as strings. They can be
# extensions coming with Sphinx (named 'sphinx.ext.*') or your custom
# ones.
extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.intersphinx',
    'sphinx.ext.todo',  # Note: todo_include_todos=True is required for directives to produce output.
    'sphinxcontrib.plantuml'
]

# Note that config options can be overridden on the command line with `-D`. E.g.
#     sphinx-build -D todo_include_todos=1 -b html -c docs/ docs/ build/html

autodoc_member_order = 'bysource'

# Resolve `single backquoted` names in docstrings against the Python docs.
default_role = 'py:obj'
intersphinx_mapping = {'python': ('https://docs.python.org/3', None)}

# Add any paths that contain templates here, relative to this directory.
templates_path = ['_templates']

# List of patterns, relative to source directory, that match files and
# directories to ignore when looking for source files.
# This pattern also affects html_static_path and html_extra_path.
exclude_patterns = ['_build']

master_doc = 'index'

# -- Options for HTML output -------------------------------------------------

# The theme to use for HTML and HTML Help pages.  See the documentation for
# a list of builtin themes.
#
html_theme = 'sphinx_rtd_theme'

# Add any paths that contain custom static files (such as style sheets) here,
# relative to this directory. They are copied after the builtin static files,
# so a file named "default.css" will overwrite the builtin "default.css".
# html_static_path = ['_static']

# -- Options for plantuml extension ------------------------------------------

# Refer to https://pypi.org/project/sphinxcontrib-plantuml/ for the expected
# behavior of the plantuml wrapper script.
# Wrapper script location may not be necessary.
# plantuml = '/usr/bin/plantuml'
plantuml_output_format = 'svg'
