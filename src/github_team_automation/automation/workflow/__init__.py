"""Side effects as explicit values.

Planners in :mod:`teams.sync` and :mod:`labeling.orchestrator` are pure and return
an ordered list of actions; :func:`actions.run_actions` is the only place that
executes them, which is also where dry-run mode short-circuits.
"""

__all__: list[str] = []
