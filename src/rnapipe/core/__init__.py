"""Core orchestration: project layout, samples, stages and execution."""
