"""Ledger key names and type-safe identifiers.

Every record lives under its own key. Two further keys are well known:
the index key, holding the serialized list of live record ids, and the
probe key written by store initialization.
"""

from __future__ import annotations

from typing import NewType


RecordId = NewType("RecordId", str)
"""Caller-supplied identifier of a survey record. Also its ledger key."""

DEFAULT_INDEX_KEY = "_surveyindex"
"""Ledger key holding the ordered list of live record ids."""

DEFAULT_PROBE_KEY = "abc"
"""Auxiliary key written by ``init``; never indexed."""

RECORD_FIELD_COUNT = 6
"""Positional fields accepted by record creation."""
