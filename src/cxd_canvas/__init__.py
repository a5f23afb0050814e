"""cxd-canvas - task derivation and diagnostics for CXD Canvas projects"""

__version__ = "0.4.0"
