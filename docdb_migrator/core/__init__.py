"""Migration core: naming, sources, strategies and the engine."""
