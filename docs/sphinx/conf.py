# Copyright 2026 EntDef Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for the EntDef documentation."""

project = "EntDef"
author = "EntDef Contributors"
release = "0.1.0"

# API pages are generated from the Google-style docstrings in src/entdef.
extensions: list[str] = ["sphinx.ext.autodoc", "sphinx.ext.napoleon"]
autodoc_member_order = "bysource"

html_theme = "alabaster"
