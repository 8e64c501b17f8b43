"""Web adapter for the 3D viewer."""
