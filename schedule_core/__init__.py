"""Construction schedule core: calendar, dependency graph, CPM, roll-up, generation."""
