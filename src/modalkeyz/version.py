__name__ = "modalkeyz"

__version__ = "0.3.0"

__description__ = "Hold-to-use modal key sequences with a live hint overlay for Linux desktops."

__doc__ = """
``modalkeyz`` turns a held key into a modal command prefix.

- While the activation key is held, further keystrokes walk a nested
  binding tree: leaves run Python callables, inner nodes open a new level.
- An overlay lists the keys available at the current level, with the
  path walked so far as its title.
- Releasing the activation key always ends the session.
- Keyboards are read with `evdev` and grabbed only while a session runs.
"""
