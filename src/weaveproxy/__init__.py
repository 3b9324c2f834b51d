"""weaveproxy package"""

# Re-export the interceptors subpackage so dotted paths like
# 'weaveproxy.interceptors.*' resolve via attribute access.
from . import interceptors as interceptors
