"""Application wiring: extensions, logging, errors and blueprint registration."""
