# Core type aliases for the JEXL data model.
# Programs arrive as plain parsed JSON (dict, list, str, int, float, bool, None).
# The reader turns them into Expression nodes (see jexl.types.expression);
# runtime values are plain Python JSON values again.
#
# Naming guidance:
# - JsonValue: an untrusted, already-parsed JSON tree (reader input, macro arguments).
# - JexlValue: an evaluated runtime value.

import logging
from typing import Any, Callable

# Runtime value alias
JexlValue = Any
# Parsed JSON document alias
JsonValue = Any

# Evaluator function type: passed to special forms so they can recurse
EvaluatorFn = Callable[..., JexlValue]

logging.getLogger(__name__).addHandler(logging.NullHandler())
