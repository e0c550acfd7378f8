"""
Pokédex application package.

  app/models.py      — typed records built from PokeAPI responses.
  app/state.py       — immutable state snapshots and the store publishing them.
  app/services/      — pure domain logic (quiz rounds).
  app/controller.py  — the state controller views talk to.
  app/config.py      — defaults, ``config.json`` and environment overrides.

``PokedexController`` is the integration point: a view subscribes to it,
calls its intent methods and re-renders whenever a new snapshot arrives.
"""
