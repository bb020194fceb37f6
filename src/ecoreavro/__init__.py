# Copyright 2026 EcoreAvro Contributors
# SPDX-License-Identifier: Apache-2.0

"""ecore-avro: Avro protocol generation from Ecore meta-models."""
