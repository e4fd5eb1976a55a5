"""Plugin package initialiser (source of truth).

Rebuild rules:
- Keep this file lightweight; do not import concrete plugins here so imports of
  ``smartgate.plugins`` remain side-effect free.
- Concrete plugin modules (``logging``) self-register when imported elsewhere
  (see ``smartgate.__init__`` for eager imports).
"""

__all__: list[str] = []
