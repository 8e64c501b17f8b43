"""modsnap — placement-and-snapping engine for prefabricated building modules.

Areas:

  catalog    — module presets (immutable catalog entries)
  placement  — placed modules, connection points, connectivity graph,
               snap resolver and the drag/select orchestrator
  web        — FastAPI adapter that turns view-layer stimuli into
               orchestrator calls
"""
