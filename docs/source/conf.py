# Configuration file for the Sphinx documentation builder.
#
# For the full list of built-in configuration values, see the documentation:
# https://www.sphinx-doc.org/en/master/usage/configuration.html

# -- Project information -----------------------------------------------------
# https://www.sphinx-doc.org/en/master/usage/configuration.html#project-information

import os
import sys

# --- Paths para encontrar el backend (paquete controlhorarios) ---
ROOT_DIR = os.path.abspath(os.path.join(__file__, "..", "..", ".."))
BACKEND_SRC = os.path.join(ROOT_DIR, "backend", "src")
sys.path.insert(0, BACKEND_SRC)

project = 'ControlHorarios'
copyright = '2025, Equipo ControlHorarios'
author = 'Equipo ControlHorarios'
release = '0.3.0'
language = 'es'

# --- Extensiones de Sphinx ---
extensions = [
    "myst_parser",           # index.md (bloque eval-rst para autosummary)
    "sphinx.ext.autodoc",    # API Python
    "sphinx.ext.autosummary",  # páginas por módulo en api/
    "sphinx.ext.napoleon",   # secciones NumPy (Parameters/Returns/Raises)
    "sphinx.ext.viewcode",
]

autosummary_generate = True

# Tema
html_theme = "sphinx_rtd_theme"
