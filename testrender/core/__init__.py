"""Component model shared by both engines.

    elements    element records, special types, context, portals
    component   Component / PureComponent base classes and hook helpers
    prop_types  declarative validators for context_types / prop_types
    errors      exception hierarchy

No module in core/ may import from reconciler/, shallow/ or test_renderer/.
"""

from . import component, elements, errors, prop_types

__all__ = ['component', 'elements', 'errors', 'prop_types']
