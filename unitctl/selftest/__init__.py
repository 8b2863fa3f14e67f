"""Built-in self-test units.

``unitctl selftest`` resolves ``units/selftest.py`` through the normal
engine. Each of its prerequisites exercises one engine guarantee and
fails its own check if that guarantee does not hold.
"""
