"""Desktop shell for WanderSpectrum."""
