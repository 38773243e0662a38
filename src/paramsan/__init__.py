"""paramsan - sanitize loosely-typed request parameters against a schema.

See `paramsan.sanitizer` for the engine. The most common entry points are
re-exported here.
"""

from .sanitizer import RecordSanitizer, Sanitizer, compile_schemas
from .version import PACKAGE_NAME, PACKAGE_VERSION

__all__ = ["Sanitizer", "RecordSanitizer", "compile_schemas", "PACKAGE_NAME", "PACKAGE_VERSION"]
