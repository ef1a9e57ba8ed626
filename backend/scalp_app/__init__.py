"""HTTP service exposing bars, scalp signals and market analysis."""
