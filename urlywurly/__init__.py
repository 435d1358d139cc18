from urlywurly.constants import SERVICE_VERSION


__version__ = SERVICE_VERSION
