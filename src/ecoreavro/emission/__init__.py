# Copyright 2026 EcoreAvro Contributors
# SPDX-License-Identifier: Apache-2.0

"""Writing translated protocols to ``.avpr`` files."""

from ecoreavro.emission.build import GeneratedProtocol, GenerationError, GenerationResult, check, generate
from ecoreavro.emission.protocol_file import PROTOCOL_SUFFIX, protocol_path, serialize, write_protocol

__all__ = [
    "serialize",
    "protocol_path",
    "write_protocol",
    "PROTOCOL_SUFFIX",
    "generate",
    "check",
    "GeneratedProtocol",
    "GenerationResult",
    "GenerationError",
]
