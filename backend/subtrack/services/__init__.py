"""Application services orchestrating use cases over units of work and ports."""
