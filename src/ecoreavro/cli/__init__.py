# Copyright 2026 EcoreAvro Contributors
# SPDX-License-Identifier: Apache-2.0

"""Command-line interface for ecore-avro."""
