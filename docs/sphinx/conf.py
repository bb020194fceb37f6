# Copyright 2026 EcoreAvro Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for the ecore-avro documentation."""

import sys
from pathlib import Path

# Make the package importable for autodoc without installing it.
sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

project = "ecore-avro"
author = "EcoreAvro Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc", "sphinx.ext.napoleon"]
autodoc_member_order = "bysource"

html_theme = "alabaster"
