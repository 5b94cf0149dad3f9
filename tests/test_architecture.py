"""Import-graph checks: every module imports cleanly on its own."""

from __future__ import annotations

import importlib
import sys

import pytest

_MODULES = [
    "hostpanel.config",
    "hostpanel.errors",
    "hostpanel.models",
    "hostpanel.models.metrics",
    "hostpanel.models.process",
    "hostpanel.db.database",
    "hostpanel.auth",
    "hostpanel.auth.tokens",
    "hostpanel.auth.authenticator",
    "hostpanel.collectors.base",
    "hostpanel.collectors.system_sampler",
    "hostpanel.collectors.process_enumerator",
    "hostpanel.api.routes",
    "hostpanel.main",
]


@pytest.mark.parametrize("module_name", _MODULES)
def test_no_circular_imports(module_name: str):
    """Each module can be imported independently without circular import errors."""
    # Restore sys.modules afterwards so patches in other tests target the right objects
    saved = dict(sys.modules)
    for k in [k for k in sys.modules if k.startswith("hostpanel")]:
        del sys.modules[k]
    try:
        importlib.import_module(module_name)
    except ImportError as e:
        if "circular" in str(e).lower():
            pytest.fail(f"Circular import detected in {module_name}: {e}")
        raise
    finally:
        sys.modules.update(saved)


def test_collectors_do_not_depend_on_auth():
    from hostpanel.collectors import base, process_enumerator, system_sampler

    for module in (base, process_enumerator, system_sampler):
        assert not any(
            (getattr(v, "__module__", None) or "").startswith("hostpanel.auth") for v in vars(module).values()
        )
