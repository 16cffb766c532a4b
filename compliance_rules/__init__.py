"""
Checkout bootstrap for ``compliance_rules``.

Running ``python -m compliance_rules.run_sweep`` from the repository root finds
this directory before any installed copy. Instead of acting as a second
package, it loads ``src/compliance_rules/__init__.py`` under the same name and
hands that module to the import system, so the public API and every submodule
resolve from the source tree exactly as after ``pip install -e .``.
"""

import importlib.util
import sys
from pathlib import Path

_PACKAGE_DIR = Path(__file__).resolve().parent.parent / "src" / __name__

if not (_PACKAGE_DIR / "__init__.py").is_file():
    raise ImportError(f"compliance_rules source tree not found at {_PACKAGE_DIR}")

_spec = importlib.util.spec_from_file_location(
    __name__,
    _PACKAGE_DIR / "__init__.py",
    submodule_search_locations=[str(_PACKAGE_DIR)],
)
_package = importlib.util.module_from_spec(_spec)
# The import system returns whatever sits in sys.modules once this body finishes.
sys.modules[__name__] = _package
_spec.loader.exec_module(_package)
