"""Book exchange core: requests, notifications and their realtime sync.

Having this file makes ``app`` a regular package so it is never resolved as a
namespace package that could pick up unrelated modules from site-packages.
"""
