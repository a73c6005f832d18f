"""Core constants used across Lineport modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

import string

LINE_DELIMITER = b"\n"
TEXT_ENCODING = "utf-8"
RECORD_ID_PAD_WIDTH = 12
RECORD_ID_SEPARATOR = "-"
SOURCE_TOKEN_LENGTH = 10
SOURCE_TOKEN_ALPHABET = string.ascii_lowercase + string.digits
STDIN_SOURCE_MARKER = "-"
DEFAULT_CHUNK_SIZE = 64 * 1024
DEFAULT_WRITE_CONCERN = 1
DEFAULT_SERVER_SELECTION_TIMEOUT_MS = 5000
DEFAULT_LOG_LEVEL = "info"
SUPPORTED_LOG_LEVELS = ("debug", "info", "warning", "error")
BUILTIN_TRANSFORM_NAMES = ("text", "json")
ENV_HOST = "LINEPORT_HOST"
ENV_DB = "LINEPORT_DB"
ENV_COLLECTION = "LINEPORT_COLLECTION"
ENV_CHUNK_SIZE = "LINEPORT_CHUNK_SIZE"
ENV_SERVER_SELECTION_TIMEOUT_MS = "LINEPORT_SERVER_SELECTION_TIMEOUT_MS"
ENV_LOG_LEVEL = "LINEPORT_LOG_LEVEL"
